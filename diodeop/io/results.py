# -*- coding: utf-8 -*-
"""
Results IO helpers.

Write:
  * iv_data.txt   (I–V sweep, whitespace columns: U I_diode I_generator)
  * metrics.json  (solver outcomes and operating points)

The sweep layout is a plain gnuplot-style table so it can be plotted directly.
"""
from __future__ import annotations
import json
import math
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd

from diodeop.postprocess.sweep import COLUMNS

SWEEP_HEADER = "U[V]    I_diode[A]     I_generator[A]"
SWEEP_FMT = ("%.2f", "%.12e", "%.12e")


def _u_format(U: np.ndarray) -> str:
    """Fewest decimals (>= 2) that print every grid voltage exactly; 10 mV grids keep %.2f."""
    scale = np.maximum(1.0, np.abs(U))
    for d in range(2, 13):
        if np.all(np.abs(np.round(U, d) - U) <= 1e-12 * scale):
            return f"%.{d}f"
    return "%.15e"


def write_sweep(path: Path, sweep: pd.DataFrame) -> Path:
    """Write the sweep table; raises OSError if the file cannot be written."""
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    arr = sweep.loc[:, list(COLUMNS)].to_numpy(dtype=np.float64)
    fmt = [_u_format(arr[:, 0]), *SWEEP_FMT[1:]]
    np.savetxt(path, arr, fmt=fmt, delimiter=" ",
               header=SWEEP_HEADER, comments="# ")
    return path


def load_sweep(path: Path) -> pd.DataFrame:
    df = pd.read_csv(Path(path), sep=r"\s+", comment="#", header=None, names=list(COLUMNS))
    return df


def _json_safe(obj: Any) -> Any:
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    return obj


def write_metrics(path: Path, metrics: Dict[str, Any]) -> Path:
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(_json_safe(metrics), f, indent=2, sort_keys=True)
    return path
