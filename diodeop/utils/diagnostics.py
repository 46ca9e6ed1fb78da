"""
diodeop/utils/diagnostics.py

Low-noise diagnostics for the scalar root finders.
Called from the solvers only when SolverConfig.debug is True.
"""

from __future__ import annotations

import math


def _fmt(x: float | None) -> str:
    if x is None:
        return "undef"
    if not math.isfinite(x):
        return str(x)
    return f"{x:+.6e}"


def log_solver_start(
    *,
    solver: str,
    x0: float,
    f0: float | None = None,
    prefix: str = "[sol]",
) -> None:
    f_txt = f" | f={_fmt(f0)}" if f0 is not None else ""
    print(f"{prefix} {solver} start | U0={_fmt(x0)} V{f_txt}")


def log_solver_iter(
    *,
    solver: str,
    it: int,
    x: float,
    fx: float,
    step: float,
    prefix: str = "[sol]",
) -> None:
    """One line per iteration: iterate, residual and step (or half-width)."""
    print(
        f"{prefix} {solver} iter {it:02d} | U={_fmt(x)} V | "
        f"f(U)={_fmt(fx)} | step={_fmt(step)}"
    )


def log_bracket(
    *,
    solver: str,
    a: float,
    b: float,
    fa: float,
    fb: float,
    prefix: str = "[sol]",
) -> None:
    print(
        f"{prefix} {solver} bracket | [a,b]=[{_fmt(a)},{_fmt(b)}] V | "
        f"f(a)={_fmt(fa)} f(b)={_fmt(fb)}"
    )


def log_convergence_summary(
    *,
    solver: str,
    status: str,
    iters: int,
    value: float | None,
    prefix: str = "[sol]",
) -> None:
    print(
        f"{prefix} {solver} done | status={status} | iters={iters} | "
        f"U={_fmt(value)}"
    )
