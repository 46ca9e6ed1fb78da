# diodeop/io/config.py
# -*- coding: utf-8 -*-
"""
YAML → PhysicalConstants / SolverConfig / RunSpec helpers.

Schema (every key optional except the `circuit` mapping itself):

circuit:
  n: 0.68          # ideality factor
  E: 1.0           # EMF [V]
  R: 100.0         # series resistance [Ohm]
  Is: 1.0e-15      # saturation current [A]
  V0: 0.025        # thermal voltage [V]  (or T_K: 300 to derive it)

solver:
  eps: 1.0e-6
  max_iter: 1000
  debug: false

newton:
  initial_guess: 0.7

bisection:
  bracket: [0.0, 1.0]

sweep:
  u_start: 0.0
  u_stop: 1.0
  points: 101
  path: iv_data.txt

output:
  metrics: null    # e.g. runs/ref/metrics.json
  png: null        # e.g. runs/ref/iv.png
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import math
from typing import Any, Sequence

import yaml

from diodeop.models.circuit import PhysicalConstants
from diodeop.solver.nonlinear import SolverConfig

__all__ = [
    "RunConfig",
    "RunSpec",
    "load_config",
    "config_from_dict",
    "apply_overrides",
    "set_value",
    "build_constants",
    "build_solver_config",
    "build_run",
]

_REF = PhysicalConstants.reference()


@dataclass
class RunConfig:
    raw: dict
    path: Path | None = None


@dataclass(slots=True)
class RunSpec:
    """Everything one operating-point run needs."""
    constants: PhysicalConstants = field(default_factory=PhysicalConstants.reference)
    solver: SolverConfig = field(default_factory=SolverConfig)
    initial_guess: float = 0.7
    bracket: tuple[float, float] = (0.0, 1.0)
    u_start: float = 0.0
    u_stop: float = 1.0
    points: int = 101
    sweep_path: Path = Path("iv_data.txt")
    metrics_path: Path | None = None
    png_path: Path | None = None

    def __post_init__(self) -> None:
        if isinstance(self.points, bool) or int(self.points) != self.points or self.points < 2:
            raise ValueError(f"sweep.points must be an integer >= 2, got {self.points!r}")
        if not self.u_stop > self.u_start:
            raise ValueError(f"sweep range must satisfy u_start < u_stop, got [{self.u_start}, {self.u_stop}]")


def load_config(path: Path) -> RunConfig:
    try:
        data = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    cfg = config_from_dict(data)
    cfg.path = Path(path)
    return cfg


def config_from_dict(data: Any) -> RunConfig:
    if not isinstance(data, dict):
        raise ValueError("Top-level YAML must be a mapping")
    _validate_minimum(data)
    return RunConfig(raw=data)


def apply_overrides(cfg: RunConfig, overrides: Sequence[str]) -> RunConfig:
    """
    Apply `dotted.key=value` overrides in place, e.g. ["solver.eps=1e-9",
    "bisection.bracket=[0.5, 1.0]"]. Values are parsed as YAML scalars/lists.
    """
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override must look like key=value, got {item!r}")
        key, _, text = item.partition("=")
        set_value(cfg, key, _yaml_value(text))
    return cfg


def set_value(cfg: RunConfig, key: str, value: Any) -> RunConfig:
    """Set `dotted.key` to an already-typed value, creating sections as needed."""
    parts = [p for p in key.strip().split(".") if p]
    if not parts:
        raise ValueError(f"Empty config key {key!r}")
    node = cfg.raw
    for p in parts[:-1]:
        nxt = node.get(p)
        if nxt is None:
            nxt = node[p] = {}
        elif not isinstance(nxt, dict):
            raise ValueError(f"Cannot descend into non-mapping key {p!r} in {key!r}")
        node = nxt
    node[parts[-1]] = value
    return cfg


def build_constants(cfg: RunConfig) -> PhysicalConstants:
    c = _section(cfg, "circuit")
    n = _float(c, "n", _REF.n)
    E = _float(c, "E", _REF.E)
    R = _float(c, "R", _REF.R)
    Is = _float(c, "Is", _REF.Is)
    if c.get("V0") is None and c.get("T_K") is not None:
        return PhysicalConstants.from_temperature(n=n, E=E, R=R, Is=Is, T_K=_float(c, "T_K", 300.0))
    return PhysicalConstants(n=n, E=E, R=R, Is=Is, V0=_float(c, "V0", _REF.V0))


def build_solver_config(cfg: RunConfig) -> SolverConfig:
    s = _section(cfg, "solver")
    defaults = SolverConfig()
    return SolverConfig(
        eps=_float(s, "eps", defaults.eps),
        max_iter=_int(s, "max_iter", defaults.max_iter),
        debug=bool(s.get("debug", defaults.debug)),
    )


def build_run(cfg: RunConfig) -> RunSpec:
    base = RunSpec()
    nw = _section(cfg, "newton")
    bi = _section(cfg, "bisection")
    sw = _section(cfg, "sweep")
    out = _section(cfg, "output")

    return RunSpec(
        constants=build_constants(cfg),
        solver=build_solver_config(cfg),
        initial_guess=_float(nw, "initial_guess", base.initial_guess),
        bracket=_bracket(bi.get("bracket", base.bracket)),
        u_start=_float(sw, "u_start", base.u_start),
        u_stop=_float(sw, "u_stop", base.u_stop),
        points=_int(sw, "points", base.points),
        sweep_path=_path(sw, "path") or base.sweep_path,
        metrics_path=_path(out, "metrics"),
        png_path=_path(out, "png"),
    )


# ---- helpers ----------------------------------------------------------------


def _yaml_value(text: str) -> Any:
    if not text.strip():
        return None
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Cannot parse override value {text!r}: {exc}") from exc


def _section(cfg: RunConfig, key: str) -> dict:
    sec = cfg.raw.get(key) or {}
    if not isinstance(sec, dict):
        raise ValueError(f"{key} must be a mapping")
    return sec


def _float(sec: dict, key: str, default: float) -> float:
    v = sec.get(key)
    if v is None:
        return float(default)
    try:
        return float(v)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {v!r}") from exc


def _bracket(v: Any) -> tuple[float, float]:
    bad = ValueError(f"bisection.bracket must be a pair of finite numbers [a, b], got {v!r}")
    if not isinstance(v, (list, tuple)) or len(v) != 2:
        raise bad
    try:
        a, b = float(v[0]), float(v[1])
    except (TypeError, ValueError) as exc:
        raise bad from exc
    if not (math.isfinite(a) and math.isfinite(b)):
        raise bad
    return a, b


def _path(sec: dict, key: str) -> Path | None:
    v = sec.get(key)
    if v is None or v == "":
        return None
    if not isinstance(v, str):
        raise ValueError(f"{key} must be a path string, got {v!r}")
    return Path(v)


def _int(sec: dict, key: str, default: int) -> int:
    v = sec.get(key)
    if v is None:
        return int(default)
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{key} must be an integer, got {v!r}")
    return v


def _validate_minimum(cfg: dict) -> None:
    for key in ("circuit",):
        if key not in cfg:
            raise ValueError(f"Missing top-level key: {key}")
