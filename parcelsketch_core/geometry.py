"""Area integration and drawable outlines for sketch shapes.

Polygon area is the signed shoelace sum of the straight chords, corrected by
the circular segment of every bulged edge: a positive bulge adds its segment
to the signed sum, a negative bulge subtracts it, and the magnitude of the
total is reported. On a polygon wound clockwise on screen (the order
rectangles convert to) positive bulges bow outward and add area; on the
opposite winding they bow inward and remove it, matching the drawn outline.

The presentation layer never computes geometry itself. It asks for
``outline(shape)`` (lines and arcs with SVG-ready flags), ``svg_path`` or a
sampled polyline and draws that.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Union

import numpy as np

from .bulge import BULGE_EPSILON, arc_center, arc_from_bulge, chord_length, is_curved
from .shapes import Circle, Geometry, Point, Polygon, Rectangle, Shape, rectangle_corners
from .units import DEFAULT_PIXELS_PER_UNIT, to_display_area, to_display_length

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Area


def shoelace(points: Sequence[Point]) -> float:
    """Signed shoelace area of the straight-chord polygon (px²)."""
    if len(points) < 3:
        return 0.0
    xy = np.array([(p.x, p.y) for p in points], dtype=float)
    x = xy[:, 0]
    y = xy[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def bulge_correction(points: Sequence[Point], eps: float = BULGE_EPSILON) -> float:
    """Signed sum of circular-segment areas contributed by bulged edges (px²)."""
    n = len(points)
    total = 0.0
    for i, p in enumerate(points):
        if not is_curved(p.bulge, eps):
            continue
        nxt = points[(i + 1) % n]
        if chord_length(p.xy(), nxt.xy()) == 0.0:
            log.debug("Skipping bulge on zero-length edge %d", i)
            continue
        segment = arc_from_bulge(p.xy(), nxt.xy(), p.bulge).segment_area
        total += segment if p.bulge > 0 else -segment
    return total


def polygon_area(points: Sequence[Point], eps: float = BULGE_EPSILON) -> float:
    """Unsigned polygon area in px², honouring curved edges."""
    if len(points) < 2:
        return 0.0
    return abs(shoelace(points) + bulge_correction(points, eps))


def geometry_area(geometry: Geometry, eps: float = BULGE_EPSILON) -> float:
    """Area in px² for any shape kind."""
    if isinstance(geometry, Rectangle):
        return abs(geometry.width * geometry.height)
    if isinstance(geometry, Circle):
        return math.pi * geometry.radius * geometry.radius
    if isinstance(geometry, Polygon):
        return polygon_area(geometry.points, eps)
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def refresh_area(shape: Shape, scale: float = DEFAULT_PIXELS_PER_UNIT, eps: float = BULGE_EPSILON) -> float:
    """Recompute and store ``shape.area`` (square feet). Call after every coordinate mutation."""
    shape.area = to_display_area(geometry_area(shape.geometry, eps), scale)
    return shape.area


# ---------------------------------------------------------------------------
# Outline


@dataclass(frozen=True)
class LineSegment:
    start: tuple[float, float]
    end: tuple[float, float]

    @property
    def length(self) -> float:
        return chord_length(self.start, self.end)


@dataclass(frozen=True)
class ArcSegment:
    start: tuple[float, float]
    end: tuple[float, float]
    radius: float
    large_arc: bool
    sweep: bool
    bulge: float
    included_angle: float

    @property
    def length(self) -> float:
        return self.radius * self.included_angle


@dataclass(frozen=True)
class CircleOutline:
    center: tuple[float, float]
    radius: float

    @property
    def length(self) -> float:
        return 2.0 * math.pi * self.radius


OutlineSegment = Union[LineSegment, ArcSegment, CircleOutline]


def _loop_outline(points: Sequence[Point], eps: float) -> List[OutlineSegment]:
    n = len(points)
    segments: List[OutlineSegment] = []
    if n < 2:
        return segments
    for i, p in enumerate(points):
        nxt = points[(i + 1) % n]
        if n == 2 and i == 1 and not is_curved(p.bulge, eps):
            break
        if is_curved(p.bulge, eps) and chord_length(p.xy(), nxt.xy()) > 0.0:
            arc = arc_from_bulge(p.xy(), nxt.xy(), p.bulge)
            segments.append(
                ArcSegment(
                    start=p.xy(),
                    end=nxt.xy(),
                    radius=arc.radius,
                    large_arc=arc.large_arc,
                    sweep=arc.sweep,
                    bulge=float(p.bulge),
                    included_angle=arc.included_angle,
                )
            )
        else:
            segments.append(LineSegment(start=p.xy(), end=nxt.xy()))
    return segments


def outline(geometry: Geometry, eps: float = BULGE_EPSILON) -> List[OutlineSegment]:
    """Boundary of a shape as drawable segments, in vertex order."""
    if isinstance(geometry, Rectangle):
        return _loop_outline(rectangle_corners(geometry), eps)
    if isinstance(geometry, Circle):
        return [CircleOutline(center=(geometry.cx, geometry.cy), radius=geometry.radius)]
    if isinstance(geometry, Polygon):
        return _loop_outline(geometry.points, eps)
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")


def _fmt(v: float) -> str:
    text = f"{v:.4f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def svg_path(geometry: Geometry, eps: float = BULGE_EPSILON) -> str:
    """SVG path data (``M``/``L``/``A``/``Z``) for the shape outline."""
    segments = outline(geometry, eps)
    if not segments:
        return ""
    if isinstance(segments[0], CircleOutline):
        c = segments[0]
        r = c.radius
        x0, y0 = c.center[0] - r, c.center[1]
        x1 = c.center[0] + r
        return (
            f"M {_fmt(x0)} {_fmt(y0)} "
            f"A {_fmt(r)} {_fmt(r)} 0 1 1 {_fmt(x1)} {_fmt(y0)} "
            f"A {_fmt(r)} {_fmt(r)} 0 1 1 {_fmt(x0)} {_fmt(y0)} Z"
        )
    parts = [f"M {_fmt(segments[0].start[0])} {_fmt(segments[0].start[1])}"]
    for seg in segments:
        if isinstance(seg, ArcSegment):
            parts.append(
                f"A {_fmt(seg.radius)} {_fmt(seg.radius)} 0 {int(seg.large_arc)} {int(seg.sweep)} "
                f"{_fmt(seg.end[0])} {_fmt(seg.end[1])}"
            )
        else:
            parts.append(f"L {_fmt(seg.end[0])} {_fmt(seg.end[1])}")
    parts.append("Z")
    return " ".join(parts)


def _arc_samples(seg: ArcSegment, samples: int) -> np.ndarray:
    cx, cy = arc_center(seg.start, seg.end, seg.bulge)
    a0 = math.atan2(seg.start[1] - cy, seg.start[0] - cx)
    direction = 1.0 if seg.sweep else -1.0
    angle = a0 + direction * np.linspace(0.0, seg.included_angle, samples, endpoint=True)
    x = cx + seg.radius * np.cos(angle)
    y = cy + seg.radius * np.sin(angle)
    return np.column_stack((x, y))


def sample_outline(geometry: Geometry, arc_samples: int = 32, eps: float = BULGE_EPSILON) -> np.ndarray:
    """Closed polyline approximating the outline (first point repeated at the end)."""
    segments = outline(geometry, eps)
    if not segments:
        return np.zeros((0, 2), dtype=float)
    if isinstance(segments[0], CircleOutline):
        c = segments[0]
        angle = np.linspace(0.0, 2.0 * math.pi, max(arc_samples, 3), endpoint=True)
        return np.column_stack((c.center[0] + c.radius * np.cos(angle), c.center[1] + c.radius * np.sin(angle)))
    chunks = [np.asarray([segments[0].start], dtype=float)]
    for seg in segments:
        if isinstance(seg, ArcSegment):
            chunks.append(_arc_samples(seg, max(arc_samples, 2))[1:])
        else:
            chunks.append(np.asarray([seg.end], dtype=float))
    return np.vstack(chunks)


def perimeter(geometry: Geometry, eps: float = BULGE_EPSILON) -> float:
    """Exact boundary length in px (arcs measured along the curve)."""
    return float(sum(seg.length for seg in outline(geometry, eps)))


def edge_lengths(geometry: Geometry, scale: float = DEFAULT_PIXELS_PER_UNIT, eps: float = BULGE_EPSILON) -> List[float]:
    """Per-edge label values in feet (one decimal), in outline order."""
    return [to_display_length(seg.length, scale) for seg in outline(geometry, eps)]
