# diodeop/utils/constants.py
from __future__ import annotations

__all__ = ["Q", "K_B", "T_ROOM", "thermal_voltage"]

# Fundamental constants (SI)
Q      = 1.602176634e-19     # elementary charge [C]
K_B    = 1.380649e-23        # Boltzmann constant [J/K]
T_ROOM = 300.0               # default device temperature [K]


def thermal_voltage(T_K: float = T_ROOM) -> float:
    """k_B·T/q in volts."""
    return K_B * float(T_K) / Q
