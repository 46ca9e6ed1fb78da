# -*- coding: utf-8 -*-
"""
Shared containers for the scalar root finders.

Two strategies live next to this module:
  - newton.py    : Newton–Raphson on f and f'
  - bisection.py : bracketing bisection on f only

Both report through RootResult; numeric trouble (flat derivative, bad
bracket, exhausted budget) is a status, never an exception.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math

__all__ = ["SolverConfig", "RootStatus", "RootResult", "DERIVATIVE_FLOOR"]

# |f'(U)| below this aborts Newton (stationary point)
DERIVATIVE_FLOOR = 1e-12


@dataclass(frozen=True, slots=True)
class SolverConfig:
    eps: float = 1e-6
    max_iter: int = 1000
    debug: bool = False

    def __post_init__(self) -> None:
        if (isinstance(self.eps, bool) or not isinstance(self.eps, (int, float))
                or not math.isfinite(self.eps) or self.eps <= 0.0):
            raise ValueError(f"eps must be finite and > 0, got {self.eps!r}")
        m = self.max_iter
        if (isinstance(m, bool) or not isinstance(m, (int, float))
                or (isinstance(m, float) and not m.is_integer()) or m < 1):
            raise ValueError(f"max_iter must be an integer >= 1, got {m!r}")


class RootStatus(str, Enum):
    CONVERGED = "converged"
    DERIVATIVE_TOO_SMALL = "derivative_too_small"
    NO_SIGN_CHANGE = "no_sign_change"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass(frozen=True, slots=True)
class RootResult:
    value: float | None     # None when the method could not produce an estimate
    iters: int
    status: RootStatus
    method: str = ""

    @property
    def converged(self) -> bool:
        return self.status is RootStatus.CONVERGED

    @property
    def is_finite(self) -> bool:
        """True if `value` is a usable number (defined and finite)."""
        return self.value is not None and math.isfinite(self.value)

    def as_dict(self) -> dict:
        v = self.value if self.is_finite else None
        return {
            "method": self.method,
            "value_V": v,
            "iters": int(self.iters),
            "status": self.status.value,
            "converged": self.converged,
        }
