# diodeop/models/circuit.py
"""
Diode fed by an EMF through a series resistor (single-equation circuit).

KCL at the diode node, with the generator current on the load line:

    I_gen(U)   = (E - U) / R
    I_diode(U) = Is * (exp(U * n / V0) - 1)

Residual whose root is the operating point (current balance times R):

    f(U)  = E - U - R * Is * (exp(U * n / V0) - 1)
    f'(U) = -1 - R * Is * (n / V0) * exp(U * n / V0)

All evaluators accept scalars or numpy arrays. Overflow of the exponential
propagates as inf/nan; nothing here raises for numeric edge cases.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from ..utils.constants import T_ROOM, thermal_voltage

__all__ = [
    "PhysicalConstants",
    "residual",
    "derivative",
    "diode_current",
    "generator_current",
]


# -----------------------------------------------------------------------------
# Parameters
# -----------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PhysicalConstants:
    """Circuit parameters; all strictly positive."""
    n: float    # diode ideality factor [-]
    E: float    # generator EMF [V]
    R: float    # series resistance [Ohm]
    Is: float   # saturation current [A]
    V0: float   # thermal voltage [V]

    def __post_init__(self) -> None:
        for name in ("n", "E", "R", "Is", "V0"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or isinstance(v, bool):
                raise ValueError(f"{name} must be a real number, got {v!r}")
            if not math.isfinite(v) or v <= 0.0:
                raise ValueError(f"{name} must be finite and > 0, got {v!r}")

    @classmethod
    def reference(cls) -> "PhysicalConstants":
        """The textbook cell: n=0.68, E=1 V, R=100 Ohm, Is=1e-15 A, V0=25 mV."""
        return cls(n=0.68, E=1.0, R=100.0, Is=1e-15, V0=0.025)

    @classmethod
    def from_temperature(
        cls,
        *,
        n: float,
        E: float,
        R: float,
        Is: float,
        T_K: float = T_ROOM,
    ) -> "PhysicalConstants":
        return cls(n=n, E=E, R=R, Is=Is, V0=thermal_voltage(T_K))

    @property
    def exp_scale(self) -> float:
        """Slope n/V0 of the exponent [1/V]."""
        return self.n / self.V0


# -----------------------------------------------------------------------------
# Evaluators
# -----------------------------------------------------------------------------

def _out(x):
    # 0-d results come back as plain floats
    return float(x) if np.ndim(x) == 0 else x


def _expo(U, c: PhysicalConstants):
    with np.errstate(over="ignore", invalid="ignore"):
        return np.exp(np.asarray(U, dtype=np.float64) * (c.n / c.V0))


def residual(U, c: PhysicalConstants):
    """f(U) = E - U - R*Is*(exp(U*n/V0) - 1)."""
    expo = _expo(U, c)
    with np.errstate(over="ignore", invalid="ignore"):
        return _out(c.E - np.asarray(U, dtype=np.float64) - c.R * c.Is * (expo - 1.0))


def derivative(U, c: PhysicalConstants):
    """f'(U) = -1 - R*Is*(n/V0)*exp(U*n/V0)."""
    expo = _expo(U, c)
    with np.errstate(over="ignore", invalid="ignore"):
        return _out(-1.0 - (c.R * c.Is * (c.n / c.V0)) * expo)


def diode_current(U, c: PhysicalConstants):
    """Shockley diode current [A]."""
    expo = _expo(U, c)
    with np.errstate(over="ignore", invalid="ignore"):
        return _out(c.Is * (expo - 1.0))


def generator_current(U, c: PhysicalConstants):
    """Load-line current (E - U)/R [A]."""
    return _out((c.E - np.asarray(U, dtype=np.float64)) / c.R)
