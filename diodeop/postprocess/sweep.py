# -*- coding: utf-8 -*-
"""
I–V sweep of the circuit: diode law and load line on a uniform voltage grid.
"""
from __future__ import annotations
import numpy as np
import pandas as pd

from diodeop.models.circuit import PhysicalConstants, diode_current, generator_current

COLUMNS = ("U", "I_diode", "I_generator")


def iv_sweep(
    constants: PhysicalConstants,
    u_start: float = 0.0,
    u_stop: float = 1.0,
    points: int = 101,
) -> pd.DataFrame:
    """
    Tabulate I_diode(U) and I_gen(U) for U in linspace(u_start, u_stop, points).

    Defaults reproduce the 10 mV grid on [0, 1] V (101 rows).
    """
    if int(points) != points or points < 2:
        raise ValueError(f"points must be an integer >= 2, got {points!r}")
    if not (np.isfinite(u_start) and np.isfinite(u_stop)) or u_stop <= u_start:
        raise ValueError(f"need finite u_start < u_stop, got [{u_start}, {u_stop}]")

    U = np.linspace(float(u_start), float(u_stop), int(points))
    return pd.DataFrame({
        "U": U,
        "I_diode": diode_current(U, constants),
        "I_generator": generator_current(U, constants),
    })
