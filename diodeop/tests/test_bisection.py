# diodeop/tests/test_bisection.py
"""
Bisection: bracket check, halving schedule, boundary conventions, tie-break.
"""
import math

from diodeop.models.circuit import PhysicalConstants, residual
from diodeop.solver.bisection import bisection, solve_bisection
from diodeop.solver.newton import solve_newton
from diodeop.solver.nonlinear import RootStatus, SolverConfig

REF = PhysicalConstants.reference()


def test_reference_converges_with_expected_count():
    eps = 1e-6
    res = solve_bisection(0.0, 1.0, REF, SolverConfig(eps=eps))
    assert res.converged
    assert res.iters == math.ceil(math.log2((1.0 - 0.0) / eps))  # 20
    assert abs(residual(res.value, REF)) < 1e-4


def test_half_width_convergence_is_inclusive():
    # (b - a)/2^10 == eps exactly: accepted at iteration 10, not 11
    eps = 2.0 ** -10
    res = solve_bisection(0.0, 1.0, REF, SolverConfig(eps=eps))
    assert res.converged
    assert res.iters == 10


def test_midpoints_shrink_geometrically():
    seen = []

    def f(x):
        seen.append(x)
        return residual(x, REF)

    bisection(f, 0.0, 1.0, SolverConfig(eps=1e-6))
    mids = seen[2:]  # first two calls are f(a), f(b)
    for k in range(len(mids) - 1):
        assert abs(mids[k + 1] - mids[k]) == 2.0 ** -(k + 2)


def test_no_sign_change_returns_undefined_without_iterating():
    big_emf = PhysicalConstants(n=0.68, E=100.0, R=100.0, Is=1e-15, V0=0.025)
    calls = []

    def f(x):
        calls.append(x)
        return residual(x, big_emf)

    res = bisection(f, 0.0, 1.0)
    assert res.status is RootStatus.NO_SIGN_CHANGE
    assert res.value is None
    assert res.iters == 0
    assert calls == [0.0, 1.0]


def test_root_on_endpoint_is_not_a_valid_bracket():
    res = bisection(lambda x: x - 0.5, 0.5, 1.0)
    assert res.status is RootStatus.NO_SIGN_CHANGE
    assert res.iters == 0
    res = bisection(lambda x: x - 0.5, 0.0, 0.5)
    assert res.status is RootStatus.NO_SIGN_CHANGE


def test_nan_end_value_is_rejected():
    res = bisection(lambda x: math.nan if x > 0.9 else 1.0 - x, 0.0, 1.0)
    assert res.status is RootStatus.NO_SIGN_CHANGE


def test_exact_zero_midpoint_goes_left():
    eps = 1e-9
    res = bisection(lambda x: x - 0.5, 0.0, 1.0, SolverConfig(eps=eps))
    assert res.converged
    assert res.value < 0.5
    assert 0.5 - res.value <= eps


def test_budget_exhausted_returns_final_midpoint():
    res = solve_bisection(0.0, 1.0, REF, SolverConfig(eps=1e-12, max_iter=5))
    assert res.status is RootStatus.BUDGET_EXHAUSTED
    assert res.iters == 5
    assert res.is_finite
    root = solve_bisection(0.0, 1.0, REF, SolverConfig(eps=1e-12)).value
    assert abs(res.value - root) <= 2.0 ** -6 + 1e-9


def test_agrees_with_newton_on_reference():
    cfg = SolverConfig(eps=1e-6, max_iter=1000)
    rb = solve_bisection(0.0, 1.0, REF, cfg)
    rn = solve_newton(0.7, REF, cfg)
    assert rb.converged and rn.converged
    assert abs(rb.value - rn.value) < 1e-5


def test_reversed_bracket_is_bisected_not_accepted():
    fwd = solve_bisection(0.0, 1.0, REF, SolverConfig(eps=1e-6))
    rev = solve_bisection(1.0, 0.0, REF, SolverConfig(eps=1e-6))
    assert rev.converged
    assert rev.iters == fwd.iters == 20
    assert abs(rev.value - fwd.value) < 2e-6
    assert abs(residual(rev.value, REF)) < 1e-4
