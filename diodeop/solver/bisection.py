# diodeop/solver/bisection.py
"""
Bisection on a caller-supplied bracket [a, b].

Boundary conventions:
- bracket is rejected when f(a)*f(b) >= 0, so a root sitting exactly on an
  endpoint does not count as a sign change (nor does a NaN end value);
- convergence when the half-width |b - a|/2 <= eps, tested on the interval
  *before* it is halved, so the count is ceil(log2(|b - a|/eps));
- a reversed bracket (a > b) is bisected the same way;
- f(c) == 0 keeps the left half [a, c].
"""

from __future__ import annotations

from typing import Callable

from ..models.circuit import PhysicalConstants, residual
from ..utils import diagnostics as diag
from .nonlinear import RootResult, RootStatus, SolverConfig

__all__ = ["bisection", "solve_bisection"]


def bisection(
    f: Callable[[float], float],
    a: float,
    b: float,
    config: SolverConfig | None = None,
) -> RootResult:
    cfg = config or SolverConfig()
    a = float(a)
    b = float(b)
    fa = float(f(a))
    fb = float(f(b))

    if cfg.debug:
        diag.log_bracket(solver="Bisection", a=a, b=b, fa=fa, fb=fb)

    # `not (x < 0)` so that a NaN product is rejected as well
    if not (fa * fb < 0.0):
        return _done(cfg, None, 0, RootStatus.NO_SIGN_CHANGE)

    for it in range(1, int(cfg.max_iter) + 1):
        c = (a + b) / 2.0
        fc = float(f(c))
        half = abs(b - a) / 2.0
        if cfg.debug:
            diag.log_solver_iter(solver="Bisection", it=it, x=c, fx=fc, step=half)
        if half <= cfg.eps:
            return _done(cfg, c, it, RootStatus.CONVERGED)
        if fa * fc <= 0.0:
            b, fb = c, fc
        else:
            a, fa = c, fc

    return _done(cfg, (a + b) / 2.0, int(cfg.max_iter), RootStatus.BUDGET_EXHAUSTED)


def solve_bisection(
    a: float,
    b: float,
    constants: PhysicalConstants,
    config: SolverConfig | None = None,
) -> RootResult:
    """Operating-point voltage by bisection on [a, b] [V]."""
    return bisection(lambda U: residual(U, constants), a, b, config)


def _done(cfg: SolverConfig, value: float | None, iters: int, status: RootStatus) -> RootResult:
    if cfg.debug:
        diag.log_convergence_summary(
            solver="Bisection", status=status.value, iters=iters, value=value,
        )
    return RootResult(value=value, iters=iters, status=status, method="bisection")
