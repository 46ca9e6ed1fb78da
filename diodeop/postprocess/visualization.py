# diodeop/postprocess/visualization.py
"""
I–V plot: diode characteristic, load line and solved operating points.
"""

from __future__ import annotations

from typing import Mapping, Tuple

import numpy as np
import matplotlib.pyplot as plt
import pandas as pd

from .operating_point import OperatingPoint

__all__ = ["plot_iv"]


def _to_mA(i_A) -> np.ndarray:
    return np.asarray(i_A, dtype=np.float64) * 1e3


def plot_iv(
    sweep: pd.DataFrame,
    points: Mapping[str, OperatingPoint] | None = None,
    *,
    ax: plt.Axes | None = None,
    title: str | None = "Diode / load-line operating point",
) -> Tuple[plt.Figure, plt.Axes]:
    """
    Plot I_diode(U) and the load line in mA, with a marker per defined point.

    Parameters
    ----------
    sweep : DataFrame
        Columns U, I_diode, I_generator (see postprocess.sweep.iv_sweep).
    points : mapping label -> OperatingPoint, optional
        Undefined points are skipped.
    ax : matplotlib Axes, optional
        If provided, plot into this axes; otherwise create a new figure.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6.0, 3.6), constrained_layout=True)
    else:
        fig = ax.figure

    U = sweep["U"].to_numpy(dtype=np.float64)
    Ig = _to_mA(sweep["I_generator"])
    Id = _to_mA(sweep["I_diode"])

    ax.plot(U, Id, label=r"$I_{diode}$", linewidth=1.8)
    ax.plot(U, Ig, label=r"$I_{gen}$ (load line)", linewidth=1.8)

    for marker, (label, op) in zip("os^D", (points or {}).items()):
        if not op.defined:
            continue
        ax.plot([op.voltage], [op.diode_current * 1e3], marker=marker,
                linestyle="none", markersize=7, fillstyle="none", label=label)

    # diode current explodes past the operating point; clip to the load line range
    top = float(np.nanmax(Ig)) if Ig.size else 1.0
    pad = 0.1 * (top if top > 0 else 1.0)
    ax.set_ylim(min(0.0, float(np.nanmin(Ig))) - pad, top + pad)

    ax.set_xlabel("U (V)")
    ax.set_ylabel("I (mA)")
    if title:
        ax.set_title(title)
    ax.grid(True, which="both", linestyle=":", linewidth=0.6)
    ax.legend(frameon=False, loc="best")
    return fig, ax
