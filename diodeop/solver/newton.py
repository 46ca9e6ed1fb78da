# diodeop/solver/newton.py
# Newton–Raphson root finder for a scalar residual.
# Plain step U - f/f', no damping; aborts on a flat derivative.

from __future__ import annotations

from typing import Callable

from ..models.circuit import PhysicalConstants, derivative, residual
from ..utils import diagnostics as diag
from .nonlinear import DERIVATIVE_FLOOR, RootResult, RootStatus, SolverConfig

__all__ = ["newton", "solve_newton"]


def newton(
    f: Callable[[float], float],
    df: Callable[[float], float],
    x0: float,
    config: SolverConfig | None = None,
) -> RootResult:
    """Find a zero of `f` starting from `x0`.

    Returns
    -------
    RootResult
        CONVERGED            : |x_next - x| < eps; value = x_next, iters = step index (1-based)
        DERIVATIVE_TOO_SMALL : |f'(x)| < DERIVATIVE_FLOOR; value = None
        BUDGET_EXHAUSTED     : max_iter steps without convergence; value = last adopted x

    Non-finite values are not trapped: they flow through the tolerance and
    floor checks like any other float (NaN never passes either).
    """
    cfg = config or SolverConfig()
    x = float(x0)

    if cfg.debug:
        diag.log_solver_start(solver="Newton", x0=x)

    for it in range(1, int(cfg.max_iter) + 1):
        fx = float(f(x))
        dfx = float(df(x))
        if abs(dfx) < DERIVATIVE_FLOOR:
            return _done(cfg, None, it, RootStatus.DERIVATIVE_TOO_SMALL)

        x_next = x - fx / dfx
        step = abs(x_next - x)
        if cfg.debug:
            diag.log_solver_iter(solver="Newton", it=it, x=x_next, fx=fx, step=step)
        if step < cfg.eps:
            return _done(cfg, x_next, it, RootStatus.CONVERGED)
        x = x_next

    return _done(cfg, x, int(cfg.max_iter), RootStatus.BUDGET_EXHAUSTED)


def solve_newton(
    U0: float,
    constants: PhysicalConstants,
    config: SolverConfig | None = None,
) -> RootResult:
    """Operating-point voltage by Newton from the initial guess `U0` [V]."""
    return newton(
        lambda U: residual(U, constants),
        lambda U: derivative(U, constants),
        U0,
        config,
    )


def _done(cfg: SolverConfig, value: float | None, iters: int, status: RootStatus) -> RootResult:
    if cfg.debug:
        diag.log_convergence_summary(
            solver="Newton", status=status.value, iters=iters, value=value,
        )
    return RootResult(value=value, iters=iters, status=status, method="newton")
