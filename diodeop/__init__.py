# diodeop/__init__.py
"""Operating point of a diode fed through a series resistor (Newton + bisection)."""
from __future__ import annotations

__version__ = "0.1.0"
