# -*- coding: utf-8 -*-
"""
Single-run workflow: constants → both root finders → report → sweep/metrics/plot.

The solvers finish before any file is touched; a failed write is logged and
does not discard the computed results.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from diodeop.io.config import RunSpec, apply_overrides, build_run, load_config
from diodeop.io.results import write_metrics, write_sweep
from diodeop.postprocess.operating_point import OperatingPoint, operating_point
from diodeop.postprocess.sweep import iv_sweep
from diodeop.solver.bisection import solve_bisection
from diodeop.solver.newton import solve_newton
from diodeop.solver.nonlinear import RootResult, RootStatus
from diodeop.utils import logger


@dataclass
class RunSummary:
    newton: RootResult
    bisection: RootResult
    newton_op: OperatingPoint
    bisection_op: OperatingPoint
    report: list[str]
    written: dict[str, Path] = field(default_factory=dict)

    @property
    def all_converged(self) -> bool:
        return self.newton.converged and self.bisection.converged

    def metrics(self, run: RunSpec) -> dict:
        c = run.constants
        return {
            "constants": {"n": c.n, "E_V": c.E, "R_ohm": c.R, "Is_A": c.Is, "V0_V": c.V0},
            "solver": {"eps": run.solver.eps, "max_iter": run.solver.max_iter},
            "newton": {**self.newton.as_dict(), "initial_guess_V": run.initial_guess,
                       "operating_point": self.newton_op.as_dict()},
            "bisection": {**self.bisection.as_dict(), "bracket_V": list(run.bracket),
                          "operating_point": self.bisection_op.as_dict()},
        }


# ---- report lines -----------------------------------------------------------


def _newton_line(res: RootResult, op: OperatingPoint) -> str:
    if res.converged and op.defined:
        return (f"Newton: U = {op.voltage:.12f} V, I = {op.diode_current:.12e} A, "
                f"iterations = {res.iters}")
    if res.status is RootStatus.DERIVATIVE_TOO_SMALL:
        return f"Newton failed: derivative too small (iterations={res.iters})"
    if res.is_finite:
        return (f"Newton did not converge within {res.iters} iterations "
                f"(last estimate U = {res.value:.12f} V)")
    return f"Newton did not converge: non-finite estimate (iterations={res.iters})"


def _bisection_line(res: RootResult, op: OperatingPoint, bracket: tuple[float, float]) -> str:
    if res.converged and op.defined:
        return (f"Bisection: U = {op.voltage:.12f} V, I = {op.diode_current:.12e} A, "
                f"iterations = {res.iters}")
    if res.status is RootStatus.NO_SIGN_CHANGE:
        a, b = bracket
        return (f"Bisection failed: no sign change on [{a:g}, {b:g}] "
                f"(iterations={res.iters})")
    if res.is_finite:
        return (f"Bisection did not converge within {res.iters} iterations "
                f"(last estimate U = {res.value:.12f} V)")
    return f"Bisection did not converge: non-finite estimate (iterations={res.iters})"


def format_report(summary: "RunSummary", bracket: tuple[float, float] = (0.0, 1.0)) -> list[str]:
    s = summary
    return [
        "---- Results ----",
        _newton_line(s.newton, s.newton_op),
        _bisection_line(s.bisection, s.bisection_op, bracket),
    ]


# ---- driver -----------------------------------------------------------------


def run_operating_point(run: RunSpec, *, echo: bool = True) -> RunSummary:
    c = run.constants
    res_n = solve_newton(run.initial_guess, c, run.solver)
    res_b = solve_bisection(run.bracket[0], run.bracket[1], c, run.solver)

    summary = RunSummary(
        newton=res_n,
        bisection=res_b,
        newton_op=operating_point(res_n, c),
        bisection_op=operating_point(res_b, c),
        report=[],
    )
    summary.report = format_report(summary, run.bracket)
    if echo:
        print("\n".join(summary.report))

    if summary.newton.is_finite and summary.bisection.is_finite and summary.all_converged:
        gap = abs(summary.newton.value - summary.bisection.value)
        if gap > 10.0 * run.solver.eps:
            logger.warn(f"Newton and bisection roots differ by {gap:.3e} V")

    sweep = iv_sweep(c, run.u_start, run.u_stop, run.points)

    try:
        summary.written["sweep"] = write_sweep(run.sweep_path, sweep)
        logger.info(f"IV data written to '{run.sweep_path}' (columns: U I_diode I_generator)")
    except OSError as exc:
        logger.error(f"could not write IV data to '{run.sweep_path}': {exc}")

    if run.metrics_path is not None:
        try:
            summary.written["metrics"] = write_metrics(run.metrics_path, summary.metrics(run))
            logger.info(f"metrics written to '{run.metrics_path}'")
        except OSError as exc:
            logger.error(f"could not write metrics to '{run.metrics_path}': {exc}")

    if run.png_path is not None:
        summary.written.update(_save_plot(run.png_path, sweep, summary))

    return summary


def run_from_config(cfg_path: Path, overrides: Optional[list[str]] = None) -> RunSummary:
    cfg = load_config(cfg_path)
    if overrides:
        apply_overrides(cfg, overrides)
    return run_operating_point(build_run(cfg))


def _save_plot(png_path: Path, sweep, summary: RunSummary) -> dict[str, Path]:
    # matplotlib is only needed when a figure is requested
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from diodeop.postprocess.visualization import plot_iv

    fig, _ax = plot_iv(sweep, {"Newton": summary.newton_op, "Bisection": summary.bisection_op})
    try:
        png_path = Path(png_path)
        if png_path.parent != Path("."):
            png_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(png_path, dpi=180)
        logger.info(f"plot written to '{png_path}'")
        return {"png": png_path}
    except (OSError, ValueError) as exc:
        # ValueError: image format matplotlib does not support
        logger.error(f"could not write plot to '{png_path}': {exc}")
        return {}
    finally:
        plt.close(fig)
