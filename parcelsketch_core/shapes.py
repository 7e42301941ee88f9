"""Shape records for the parcel sketch.

A shape is one of three closed geometry kinds (``Rectangle``, ``Circle``,
``Polygon``) wrapped in a ``Shape`` record that also carries the derived area
in square feet and optional sub-area descriptions.

Persisted form (owned by external storage)::

    {"type": "polygon",
     "coordinates": {"points": [{"x": 0, "y": 0, "bulge": 0.41}, ...]},
     "area": 114.3}

``bulge`` on a polygon vertex belongs to the edge running from that vertex to
the next one in array order. It is written only when set and read back
verbatim, so ``0.0`` and "absent" survive a round trip unchanged.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Union

import numpy as np

from .errors import SketchSchemaError

ShapeType = str  # "rectangle" | "circle" | "polygon"


@dataclass
class Point:
    x: float
    y: float
    bulge: Optional[float] = None

    def xy(self) -> tuple[float, float]:
        return (self.x, self.y)

    def copy(self) -> "Point":
        return Point(self.x, self.y, self.bulge)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"x": float(self.x), "y": float(self.y)}
        if self.bulge is not None:
            d["bulge"] = float(self.bulge)
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Point":
        if not isinstance(d, Mapping):
            raise SketchSchemaError(f"point must be an object, got {d!r}")
        bulge = d.get("bulge")
        return Point(
            x=_as_float(d.get("x"), "point.x"),
            y=_as_float(d.get("y"), "point.y"),
            bulge=None if bulge is None else _as_float(bulge, "point.bulge"),
        )


@dataclass
class Rectangle:
    """Axis-aligned rectangle; ``width`` and ``height`` stay positive."""

    x: float
    y: float
    width: float
    height: float


@dataclass
class Circle:
    cx: float
    cy: float
    radius: float


@dataclass
class Polygon:
    """Implicitly closed vertex loop (last point connects to the first)."""

    points: List[Point] = field(default_factory=list)


Geometry = Union[Rectangle, Circle, Polygon]


class Bounds(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass
class SubArea:
    """Labelled portion of a shape (e.g. ``FFL`` finished floor) with its effective area."""

    label: str
    effective_area: float = 0.0

    def __post_init__(self) -> None:
        label = str(self.label).strip().upper()
        if not label or len(label) > 3:
            raise SketchSchemaError(f"sub-area label must be 1-3 characters, got {self.label!r}")
        self.label = label
        self.effective_area = float(self.effective_area)

    @classmethod
    def from_factor(cls, label: str, area: float, factor: float) -> "SubArea":
        return cls(label=label, effective_area=float(round(area * factor)))

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "effective_area": self.effective_area}


@dataclass(eq=False)
class Shape:
    """A geometry plus derived area (square feet).

    ``area`` is never authoritative: every mutation recomputes it from the
    coordinates (see ``geometry.refresh_area``). Equality is identity so the
    arc workflow can hold on to a shape across rectangle conversion.
    """

    geometry: Geometry
    area: float = 0.0
    descriptions: List[SubArea] = field(default_factory=list)
    id: Optional[str] = None

    @property
    def type(self) -> ShapeType:
        return geometry_type(self.geometry)

    @property
    def effective_area(self) -> float:
        return float(sum(d.effective_area for d in self.descriptions))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.type,
            "coordinates": coordinates_to_dict(self.geometry),
            "area": float(self.area),
        }
        if self.descriptions:
            d["descriptions"] = [desc.to_dict() for desc in self.descriptions]
        if self.id is not None:
            d["id"] = self.id
        return d

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Shape":
        if not isinstance(d, Mapping):
            raise SketchSchemaError(f"shape must be an object, got {d!r}")
        geometry = coordinates_from_dict(d.get("type"), d.get("coordinates"))
        descriptions = []
        for item in d.get("descriptions") or []:
            if isinstance(item, str):
                descriptions.append(SubArea(label=item))
            elif isinstance(item, Mapping):
                descriptions.append(SubArea(label=item.get("label", ""), effective_area=item.get("effective_area", 0.0)))
            else:
                raise SketchSchemaError(f"invalid description entry {item!r}")
        ident = d.get("id", d.get("_id"))
        return Shape(
            geometry=geometry,
            area=_as_float(d.get("area", 0.0), "area"),
            descriptions=descriptions,
            id=None if ident is None else str(ident),
        )


# ---------------------------------------------------------------------------
# Persistence helpers


def geometry_type(geometry: Geometry) -> ShapeType:
    if isinstance(geometry, Rectangle):
        return "rectangle"
    if isinstance(geometry, Circle):
        return "circle"
    if isinstance(geometry, Polygon):
        return "polygon"
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def coordinates_to_dict(geometry: Geometry) -> Dict[str, Any]:
    if isinstance(geometry, Rectangle):
        return {
            "x": float(geometry.x),
            "y": float(geometry.y),
            "width": float(geometry.width),
            "height": float(geometry.height),
        }
    if isinstance(geometry, Circle):
        return {"cx": float(geometry.cx), "cy": float(geometry.cy), "radius": float(geometry.radius)}
    if isinstance(geometry, Polygon):
        return {"points": [p.to_dict() for p in geometry.points]}
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def coordinates_from_dict(kind: Any, coords: Any) -> Geometry:
    if not isinstance(coords, Mapping):
        raise SketchSchemaError(f"coordinates must be an object, got {coords!r}")
    if kind == "rectangle":
        width = _as_float(coords.get("width"), "coordinates.width")
        height = _as_float(coords.get("height"), "coordinates.height")
        if width <= 0 or height <= 0:
            raise SketchSchemaError(f"rectangle size must be positive, got {width}x{height}")
        return Rectangle(
            x=_as_float(coords.get("x"), "coordinates.x"),
            y=_as_float(coords.get("y"), "coordinates.y"),
            width=width,
            height=height,
        )
    if kind == "circle":
        radius = _as_float(coords.get("radius"), "coordinates.radius")
        if radius < 0:
            raise SketchSchemaError(f"circle radius must be non-negative, got {radius}")
        return Circle(
            cx=_as_float(coords.get("cx"), "coordinates.cx"),
            cy=_as_float(coords.get("cy"), "coordinates.cy"),
            radius=radius,
        )
    if kind == "polygon":
        raw_points = coords.get("points")
        if not isinstance(raw_points, list):
            raise SketchSchemaError("polygon coordinates need a 'points' list")
        if len(raw_points) < 3:
            raise SketchSchemaError(f"polygon needs at least 3 points, got {len(raw_points)}")
        return Polygon(points=[Point.from_dict(p) for p in raw_points])
    raise SketchSchemaError(f"unknown shape type {kind!r}")


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise SketchSchemaError(f"{name} must be a number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise SketchSchemaError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(result):
        raise SketchSchemaError(f"{name} must be finite, got {value!r}")
    return result


# ---------------------------------------------------------------------------
# Shape-level geometry


def get_bounds(geometry: Geometry) -> Bounds:
    """Axis-aligned bounds. Polygon bounds use vertices only (arcs beyond the chord are ignored)."""
    if isinstance(geometry, Rectangle):
        return Bounds(geometry.x, geometry.y, geometry.x + geometry.width, geometry.y + geometry.height)
    if isinstance(geometry, Circle):
        r = geometry.radius
        return Bounds(geometry.cx - r, geometry.cy - r, geometry.cx + r, geometry.cy + r)
    if isinstance(geometry, Polygon):
        if not geometry.points:
            return Bounds(0.0, 0.0, 0.0, 0.0)
        xy = np.array([(p.x, p.y) for p in geometry.points], dtype=float)
        lo = xy.min(axis=0)
        hi = xy.max(axis=0)
        return Bounds(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def translate(geometry: Geometry, dx: float, dy: float) -> None:
    """Move every coordinate of ``geometry`` in place."""
    if isinstance(geometry, Rectangle):
        geometry.x += dx
        geometry.y += dy
    elif isinstance(geometry, Circle):
        geometry.cx += dx
        geometry.cy += dy
    elif isinstance(geometry, Polygon):
        for p in geometry.points:
            p.x += dx
            p.y += dy
    else:
        raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def rectangle_corners(rect: Rectangle) -> List[Point]:
    """Clockwise (screen space) from the top-left corner."""
    x, y, w, h = rect.x, rect.y, rect.width, rect.height
    return [Point(x, y), Point(x + w, y), Point(x + w, y + h), Point(x, y + h)]


def to_polygon(rect: Rectangle) -> Polygon:
    return Polygon(points=rectangle_corners(rect))


def centroid(geometry: Geometry) -> tuple[float, float]:
    """Label anchor: vertex average for polygons, centre otherwise."""
    if isinstance(geometry, Rectangle):
        return (geometry.x + geometry.width / 2.0, geometry.y + geometry.height / 2.0)
    if isinstance(geometry, Circle):
        return (geometry.cx, geometry.cy)
    if isinstance(geometry, Polygon):
        if not geometry.points:
            return (0.0, 0.0)
        xy = np.array([(p.x, p.y) for p in geometry.points], dtype=float)
        mean = xy.mean(axis=0)
        return (float(mean[0]), float(mean[1]))
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def copy_geometry(geometry: Geometry) -> Geometry:
    if isinstance(geometry, Rectangle):
        return Rectangle(geometry.x, geometry.y, geometry.width, geometry.height)
    if isinstance(geometry, Circle):
        return Circle(geometry.cx, geometry.cy, geometry.radius)
    if isinstance(geometry, Polygon):
        return Polygon(points=[p.copy() for p in geometry.points])
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")
