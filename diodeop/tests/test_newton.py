# diodeop/tests/test_newton.py
"""
Newton–Raphson: convergence, flat-derivative abort, exhausted budget.
"""
import math

import pytest

from diodeop.models.circuit import PhysicalConstants, residual
from diodeop.solver.newton import newton, solve_newton
from diodeop.solver.nonlinear import RootStatus, SolverConfig

REF = PhysicalConstants.reference()


def test_reference_converges():
    cfg = SolverConfig(eps=1e-6, max_iter=1000)
    res = solve_newton(0.7, REF, cfg)
    assert res.converged and res.status is RootStatus.CONVERGED
    assert 1 <= res.iters <= 20
    assert 0.9 < res.value < 1.0
    assert abs(residual(res.value, REF)) < 10 * cfg.eps


def test_iteration_count_is_one_based():
    # linear residual: one exact step, second step is zero -> converged at iteration 2
    res = newton(lambda x: 2.0 - x, lambda x: -1.0, 0.0, SolverConfig(eps=1e-9))
    assert res.converged
    assert res.iters == 2
    assert res.value == 2.0


def test_stationary_start_reports_derivative_too_small():
    res = newton(lambda x: (x - 1.0) ** 2 + 1.0, lambda x: 2.0 * (x - 1.0), 1.0)
    assert res.status is RootStatus.DERIVATIVE_TOO_SMALL
    assert res.value is None
    assert res.iters == 1
    assert not res.converged


def test_derivative_too_small_detected_mid_run():
    # x^2 + 1 from x=1 steps exactly onto x=0 where f'(0) = 0
    res = newton(lambda x: x * x + 1.0, lambda x: 2.0 * x, 1.0)
    assert res.status is RootStatus.DERIVATIVE_TOO_SMALL
    assert res.iters == 2
    assert res.value is None


def test_budget_exhausted_returns_last_estimate():
    res = solve_newton(0.7, REF, SolverConfig(eps=1e-12, max_iter=2))
    assert res.status is RootStatus.BUDGET_EXHAUSTED
    assert not res.converged
    assert res.iters == 2
    assert res.is_finite
    # two steps from 0.7 land near, but not on, the root
    assert 0.9 < res.value < 1.1


def test_overflowing_guess_yields_non_finite_estimate():
    res = solve_newton(40.0, REF, SolverConfig(max_iter=5))
    assert res.status is RootStatus.BUDGET_EXHAUSTED
    assert res.value is not None and math.isnan(res.value)
    assert not res.is_finite


def test_debug_prints_iterations(capsys):
    solve_newton(0.7, REF, SolverConfig(debug=True))
    out = capsys.readouterr().out
    assert "[sol] Newton start" in out
    assert "[sol] Newton iter 01" in out
    assert "status=converged" in out


@pytest.mark.parametrize("kwargs", [
    dict(eps=0.0),
    dict(eps=-1e-6),
    dict(eps=math.nan),
    dict(eps="tight"),
    dict(eps=None),
    dict(max_iter=0),
    dict(max_iter=2.5),
    dict(max_iter=math.inf),
    dict(max_iter=math.nan),
    dict(max_iter="10"),
    dict(max_iter=True),
])
def test_solver_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        SolverConfig(**kwargs)
