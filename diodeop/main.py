# diodeop/main.py
"""
diodeop main entrypoint.

Default subcommand: op
Usage examples:
    python -m diodeop
    python -m diodeop op --help
    python -m diodeop op --E 1.2 --R 50 --guess 0.8 --bracket 0 1.2 --out runs/iv.txt
    python -m diodeop op --config configs/reference.yaml --set solver.eps=1e-9
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .io.config import (
    RunConfig,
    apply_overrides,
    build_run,
    config_from_dict,
    load_config,
    set_value,
)
from .workflows.run_op import run_operating_point

__all__ = ["main"]


# ------------------------------ op subcommand -------------------------------


def _add_op_subparser(
    subparsers: argparse._SubParsersAction,
) -> argparse.ArgumentParser:
    p = subparsers.add_parser(
        "op", help="Diode / load-line operating point (Newton + bisection)"
    )
    p.add_argument("--config", type=Path, default=None, help="YAML run configuration")
    p.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Override a config entry, e.g. solver.eps=1e-9 (repeatable)"
    )
    # circuit
    p.add_argument("--n", type=float, default=None, help="Diode ideality factor")
    p.add_argument("--E", type=float, default=None, help="Generator EMF [V]")
    p.add_argument("--R", type=float, default=None, help="Series resistance [Ohm]")
    p.add_argument("--Is", type=float, default=None, help="Saturation current [A]")
    p.add_argument("--V0", type=float, default=None, help="Thermal voltage [V]")
    p.add_argument(
        "--T", type=float, default=None,
        help="Temperature [K]; sets V0 = k_B*T/q when --V0 is not given"
    )
    # solvers
    p.add_argument("--eps", type=float, default=None, help="Convergence tolerance [V]")
    p.add_argument("--max-iter", type=int, default=None, help="Iteration budget per solver")
    p.add_argument("--guess", type=float, default=None, help="Newton initial guess [V]")
    p.add_argument(
        "--bracket", type=float, nargs=2, default=None, metavar=("A", "B"),
        help="Bisection bracket [V]"
    )
    p.add_argument("--debug", action="store_true", help="Per-iteration solver prints")
    # outputs
    p.add_argument("--points", type=int, default=None, help="Sweep rows")
    p.add_argument("--u-start", type=float, default=None, help="Sweep start [V]")
    p.add_argument("--u-stop", type=float, default=None, help="Sweep stop [V]")
    p.add_argument("--out", default=None, help="I–V table output path (default iv_data.txt)")
    p.add_argument("--metrics", default=None, help="JSON summary output path")
    p.add_argument("--png", default=None, help="PNG plot output path")
    p.set_defaults(cmd="op")
    return p


def _cli_values(ns: argparse.Namespace) -> list[tuple[str, object]]:
    """Explicit flags as (dotted key, value) pairs; they beat the YAML and --set."""
    pairs = [
        ("circuit.n", ns.n), ("circuit.E", ns.E), ("circuit.R", ns.R),
        ("circuit.Is", ns.Is), ("circuit.V0", ns.V0), ("circuit.T_K", ns.T),
        ("solver.eps", ns.eps), ("solver.max_iter", ns.max_iter),
        ("newton.initial_guess", ns.guess),
        ("sweep.points", ns.points), ("sweep.u_start", ns.u_start),
        ("sweep.u_stop", ns.u_stop), ("sweep.path", ns.out),
        ("output.metrics", ns.metrics), ("output.png", ns.png),
    ]
    out = [(k, v) for k, v in pairs if v is not None]
    if ns.bracket is not None:
        out.append(("bisection.bracket", list(ns.bracket)))
    if ns.T is not None and ns.V0 is None:
        out.append(("circuit.V0", None))
    if ns.debug:
        out.append(("solver.debug", True))
    return out


def _run_op(ns: argparse.Namespace) -> int:
    try:
        cfg: RunConfig = load_config(ns.config) if ns.config else config_from_dict({"circuit": {}})
        apply_overrides(cfg, ns.overrides)
        for key, value in _cli_values(ns):
            set_value(cfg, key, value)
        run = build_run(cfg)
    except (OSError, ValueError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 2
    summary = run_operating_point(run)
    return 0 if summary.all_converged else 1


# --------------------------------- main() ------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="diodeop — diode operating-point solver")
    sub = parser.add_subparsers(dest="cmd")
    op_parser = _add_op_subparser(sub)

    args = list(sys.argv[1:] if argv is None else argv)

    # If no subcommand given, default to 'op' with defaults
    if not args:
        return _run_op(op_parser.parse_args([]))

    ns = parser.parse_args(args)
    if ns.cmd == "op":
        return _run_op(ns)

    parser.error("Unknown command (try: op)")
    return 2


if __name__ == "__main__":
    sys.exit(main())
