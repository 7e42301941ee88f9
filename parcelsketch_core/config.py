"""Sketch settings: grid, snapping and hit-test tolerances.

Defaults match a house sketch drawn at ten pixels per foot. Hosts can override
any field through ``PARCELSKETCH_*`` environment variables or a JSON mapping.
"""
from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Tuple

from .errors import SketchConfigError
from .units import DEFAULT_PIXELS_PER_UNIT

log = logging.getLogger(__name__)

ENV_PREFIX = "PARCELSKETCH_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class SketchSettings:
    grid_size: float = DEFAULT_PIXELS_PER_UNIT     # pixels per foot
    snap_enabled: bool = True
    grid_origin: Tuple[float, float] = (0.0, 0.0)
    edge_hit_threshold: float = 10.0               # px
    min_arc_chord: float = 1.0                     # px
    straight_sagitta: float = 5.0                  # px, cursor depth below which an arc stays straight
    bulge_epsilon: float = 1e-4

    def __post_init__(self) -> None:
        self.grid_size = _positive(self.grid_size, "grid_size")
        self.edge_hit_threshold = _positive(self.edge_hit_threshold, "edge_hit_threshold")
        self.min_arc_chord = _non_negative(self.min_arc_chord, "min_arc_chord")
        self.straight_sagitta = _non_negative(self.straight_sagitta, "straight_sagitta")
        self.bulge_epsilon = _non_negative(self.bulge_epsilon, "bulge_epsilon")
        try:
            ox, oy = self.grid_origin
            self.grid_origin = (float(ox), float(oy))
        except (TypeError, ValueError) as exc:
            raise SketchConfigError(f"grid_origin must be an (x, y) pair, got {self.grid_origin!r}") from exc

    def asdict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["grid_origin"] = list(self.grid_origin)
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SketchSettings":
        known = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key in known:
                kwargs[key] = _as_bool(value, key) if key == "snap_enabled" else value
            else:
                log.debug("Ignoring unknown setting %r", key)
        if "grid_origin" in kwargs:
            kwargs["grid_origin"] = tuple(kwargs["grid_origin"])
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SketchSettings":
        env = os.environ if environ is None else environ
        settings = cls()
        updates: Dict[str, Any] = {}
        for name in ("grid_size", "edge_hit_threshold", "min_arc_chord", "straight_sagitta", "bulge_epsilon"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw.strip():
                updates[name] = _as_float(raw, name)
        raw_snap = env.get(ENV_PREFIX + "SNAP_ENABLED")
        if raw_snap is not None and raw_snap.strip():
            updates["snap_enabled"] = _as_bool(raw_snap, "snap_enabled")
        raw_origin = env.get(ENV_PREFIX + "GRID_ORIGIN")
        if raw_origin:
            parts = raw_origin.split(",")
            if len(parts) != 2:
                raise SketchConfigError(f"{ENV_PREFIX}GRID_ORIGIN must be 'x,y', got {raw_origin!r}")
            updates["grid_origin"] = (_as_float(parts[0], "grid_origin"), _as_float(parts[1], "grid_origin"))
        return replace(settings, **updates) if updates else settings


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise SketchConfigError(f"{name} must be a number, got {value!r}") from exc


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise SketchConfigError(f"{name} must be a boolean, got {value!r}")


def _positive(value: Any, name: str) -> float:
    v = _as_float(value, name)
    if v <= 0.0:
        raise SketchConfigError(f"{name} must be > 0, got {v}")
    return v


def _non_negative(value: Any, name: str) -> float:
    v = _as_float(value, name)
    if v < 0.0:
        raise SketchConfigError(f"{name} must be >= 0, got {v}")
    return v
