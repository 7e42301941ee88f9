"""A sketch: the ordered shape list of one building card plus its area rollups."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import SketchSettings
from .errors import SketchSchemaError
from .geometry import refresh_area
from .shapes import Shape


@dataclass
class Sketch:
    name: str = "Sketch"
    shapes: List[Shape] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def total_area(self) -> float:
        return float(sum(s.area for s in self.shapes))

    @property
    def total_effective_area(self) -> float:
        return float(sum(s.effective_area for s in self.shapes))

    @property
    def description_codes(self) -> List[str]:
        """Distinct sub-area labels, in first-seen order."""
        seen: Dict[str, None] = {}
        for shape in self.shapes:
            for desc in shape.descriptions:
                seen.setdefault(desc.label, None)
        return list(seen)

    @property
    def area_range(self) -> Tuple[float, float]:
        areas = [s.area for s in self.shapes if s.area]
        if not areas:
            return (0.0, 0.0)
        return (min(areas), max(areas))

    def description_totals(self) -> Dict[str, Dict[str, int]]:
        """Raw and effective square footage per sub-area label (rounded)."""
        totals: Dict[str, Dict[str, float]] = {}
        for shape in self.shapes:
            for desc in shape.descriptions:
                entry = totals.setdefault(desc.label, {"total_area": 0.0, "effective_area": 0.0})
                entry["total_area"] += shape.area
                entry["effective_area"] += desc.effective_area
        return {
            label: {"total_area": round(v["total_area"]), "effective_area": round(v["effective_area"])}
            for label, v in totals.items()
        }

    def refresh_areas(self, settings: Optional[SketchSettings] = None) -> None:
        cfg = settings if settings is not None else SketchSettings()
        for shape in self.shapes:
            refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)

    def to_dict(self) -> Dict[str, Any]:
        low, high = self.area_range
        d: Dict[str, Any] = {
            "name": self.name,
            "shapes": [s.to_dict() for s in self.shapes],
            "total_area": round(self.total_area),
            "total_effective_area": round(self.total_effective_area),
            "description_codes": self.description_codes,
            "area_range": {"min": low, "max": high},
        }
        if self.id is not None:
            d["id"] = self.id
        return d

    @staticmethod
    def from_dict(data: Mapping[str, Any], settings: Optional[SketchSettings] = None) -> "Sketch":
        """Load a sketch; stored areas are recomputed from coordinates."""
        if not isinstance(data, Mapping):
            raise SketchSchemaError(f"sketch must be an object, got {type(data).__name__}")
        raw_shapes = data.get("shapes", [])
        if not isinstance(raw_shapes, list):
            raise SketchSchemaError("sketch 'shapes' must be a list")
        ident = data.get("id", data.get("_id"))
        sketch = Sketch(
            name=str(data.get("name", "Sketch")),
            shapes=[Shape.from_dict(item) for item in raw_shapes],
            id=None if ident is None else str(ident),
        )
        sketch.refresh_areas(settings)
        return sketch
