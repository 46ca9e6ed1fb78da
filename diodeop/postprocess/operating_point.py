# -*- coding: utf-8 -*-
"""
Operating point (U, I_diode, I_gen) from a root-finder result.
"""
from __future__ import annotations
from dataclasses import dataclass
import math

from diodeop.models.circuit import PhysicalConstants, diode_current, generator_current
from diodeop.solver.nonlinear import RootResult

NAN = float("nan")


@dataclass(frozen=True, slots=True)
class OperatingPoint:
    voltage: float
    diode_current: float
    generator_current: float

    @classmethod
    def undefined(cls) -> "OperatingPoint":
        return cls(NAN, NAN, NAN)

    @property
    def defined(self) -> bool:
        return all(math.isfinite(x) for x in (self.voltage, self.diode_current, self.generator_current))

    def as_dict(self) -> dict:
        # JSON has no NaN; undefined fields go out as null
        def _f(x):
            return float(x) if math.isfinite(x) else None
        return {
            "U_V": _f(self.voltage),
            "I_diode_A": _f(self.diode_current),
            "I_generator_A": _f(self.generator_current),
        }


def operating_point(result: RootResult, constants: PhysicalConstants) -> OperatingPoint:
    """Currents at the root; undefined when the root is missing or non-finite."""
    if not result.is_finite:
        return OperatingPoint.undefined()
    U = float(result.value)
    return OperatingPoint(
        voltage=U,
        diode_current=diode_current(U, constants),
        generator_current=generator_current(U, constants),
    )
