"""Edge and vertex edit operations (hit-test / insert / drag / curve)."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .bulge import bulge_from_sagitta, chord_length, is_curved
from .config import SketchSettings
from .errors import DegenerateGeometryError
from .geometry import refresh_area
from .shapes import Circle, Point, Polygon, Rectangle, Shape, rectangle_corners, to_polygon, translate
from .snap import GridSnap

log = logging.getLogger(__name__)

XY = Tuple[float, float]
Handle = Union[int, str]
RECTANGLE_HANDLES = ("top-left", "top-right", "bottom-right", "bottom-left")
# Corner opposite each handle, as an index into rectangle_corners().
_OPPOSITE_CORNER = {"top-left": 2, "top-right": 3, "bottom-right": 0, "bottom-left": 1}


def _settings(settings: Optional[SketchSettings]) -> SketchSettings:
    return settings if settings is not None else SketchSettings()


# ---------------------------------------------------------------------------
# Hit testing


@dataclass(frozen=True)
class SegmentProjection:
    distance: float
    closest_point: XY
    t: float


def point_to_segment_distance(p: Sequence[float], a: Sequence[float], b: Sequence[float]) -> SegmentProjection:
    """Distance from ``p`` to segment a-b using a clamped projection."""
    px, py = float(p[0]), float(p[1])
    ax, ay = float(a[0]), float(a[1])
    abx = float(b[0]) - ax
    aby = float(b[1]) - ay
    denom = abx * abx + aby * aby
    if denom == 0.0:
        return SegmentProjection(math.hypot(px - ax, py - ay), (ax, ay), 0.0)
    t = ((px - ax) * abx + (py - ay) * aby) / denom
    t = max(0.0, min(1.0, t))
    cx, cy = ax + abx * t, ay + aby * t
    return SegmentProjection(math.hypot(px - cx, py - cy), (cx, cy), t)


@dataclass(frozen=True)
class EdgeHit:
    shape_index: int
    shape: Shape
    edge_index: int     # index of the edge's start vertex
    edge_start: XY
    edge_end: XY
    insert_point: XY
    distance: float


def iter_edges(shape: Shape) -> Iterator[Tuple[int, XY, XY]]:
    """Yield ``(start_index, start, end)`` for each edge of a polygon or rectangle.

    Rectangles are walked as their implicit four-corner loop without being
    converted. Other kinds, and polygons with fewer than two points, yield nothing.
    """
    geometry = shape.geometry
    if isinstance(geometry, Rectangle):
        points = rectangle_corners(geometry)
    elif isinstance(geometry, Polygon):
        points = geometry.points
    else:
        return
    n = len(points)
    if n < 2:
        return
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        yield i, (a.x, a.y), (b.x, b.y)


def find_closest_edge(shapes: Sequence[Shape], p: Sequence[float], threshold: float) -> Optional[EdgeHit]:
    """Closest polygon/rectangle edge to ``p`` across all shapes, within ``threshold`` px.

    Hit-testing runs against the straight chord even for curved edges.
    """
    best: Optional[EdgeHit] = None
    for shape_index, shape in enumerate(shapes):
        for edge_index, a, b in iter_edges(shape):
            proj = point_to_segment_distance(p, a, b)
            if proj.distance >= threshold:
                continue
            if best is None or proj.distance < best.distance:
                best = EdgeHit(
                    shape_index=shape_index,
                    shape=shape,
                    edge_index=edge_index,
                    edge_start=a,
                    edge_end=b,
                    insert_point=proj.closest_point,
                    distance=proj.distance,
                )
    return best


def find_closest_vertex(shapes: Sequence[Shape], p: Sequence[float], threshold: float) -> Optional[Tuple[int, int]]:
    """``(shape_index, vertex_index)`` of the nearest polygon vertex within ``threshold``."""
    best: Optional[Tuple[int, int]] = None
    best_dist = float(threshold)
    for shape_index, shape in enumerate(shapes):
        if not isinstance(shape.geometry, Polygon):
            continue
        for vertex_index, v in enumerate(shape.geometry.points):
            d = math.hypot(v.x - float(p[0]), v.y - float(p[1]))
            if d < best_dist:
                best, best_dist = (shape_index, vertex_index), d
    return best


# ---------------------------------------------------------------------------
# Mutations


def convert_rectangle_to_polygon(shape: Shape, settings: Optional[SketchSettings] = None) -> bool:
    """Replace a rectangle's geometry with its four-corner polygon, in place.

    Returns ``False`` when the shape is not a rectangle. The ``Shape`` object
    itself is kept, so references to it stay valid.
    """
    if not isinstance(shape.geometry, Rectangle):
        return False
    cfg = _settings(settings)
    shape.geometry = to_polygon(shape.geometry)
    refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)
    log.debug("Converted rectangle %s to polygon", shape.id or hex(id(shape)))
    return True


def insert_vertex(
    shape: Shape,
    after_index: int,
    point: Sequence[float],
    settings: Optional[SketchSettings] = None,
) -> int:
    """Insert a grid-snapped vertex right after ``after_index``.

    Returns the new vertex index, or ``-1`` when the shape is not a polygon or
    the index is out of range (nothing is changed in that case).
    """
    geometry = shape.geometry
    if not isinstance(geometry, Polygon):
        return -1
    if not 0 <= after_index < len(geometry.points):
        return -1
    cfg = _settings(settings)
    x, y = GridSnap.from_settings(cfg).point(point)
    geometry.points.insert(after_index + 1, Point(x, y))
    refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)
    log.debug("Inserted vertex (%s, %s) at %d", x, y, after_index + 1)
    return after_index + 1


def remove_vertex(shape: Shape, index: int, settings: Optional[SketchSettings] = None) -> bool:
    """Delete a polygon vertex, keeping at least three."""
    geometry = shape.geometry
    if not isinstance(geometry, Polygon) or len(geometry.points) <= 3:
        return False
    if not 0 <= index < len(geometry.points):
        return False
    cfg = _settings(settings)
    del geometry.points[index]
    refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)
    return True


def _edge_endpoints(shape: Shape, index: int) -> Tuple[Point, Point]:
    geometry = shape.geometry
    if not isinstance(geometry, Polygon):
        raise ValueError(f"Arcs can only be set on polygon edges, not on a {shape.type}")
    points = geometry.points
    if not 0 <= index < len(points):
        raise ValueError(f"Vertex index {index} out of range for {len(points)} points")
    return points[index], points[(index + 1) % len(points)]


def set_bulge(shape: Shape, index: int, bulge: Optional[float], settings: Optional[SketchSettings] = None) -> float:
    """Assign the bulge of the edge starting at vertex ``index`` and refresh the area.

    ``None`` clears the bulge. Raises ``DegenerateGeometryError`` when a curve
    is requested on an edge shorter than ``min_arc_chord``.
    """
    cfg = _settings(settings)
    start, end = _edge_endpoints(shape, index)
    if bulge is not None and is_curved(bulge, cfg.bulge_epsilon):
        if chord_length(start.xy(), end.xy()) < cfg.min_arc_chord:
            log.warning("Refusing bulge on edge %d: endpoints too close", index)
            raise DegenerateGeometryError("Points are too close together to form an arc")
    start.bulge = None if bulge is None else float(bulge)
    return refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)


def apply_sagitta(
    shape: Shape,
    index: int,
    signed_sagitta_px: float,
    settings: Optional[SketchSettings] = None,
) -> float:
    """Curve the edge at ``index`` to a numeric depth (px, sign picks the side)."""
    cfg = _settings(settings)
    start, end = _edge_endpoints(shape, index)
    if chord_length(start.xy(), end.xy()) < cfg.min_arc_chord:
        log.warning("Refusing sagitta on edge %d: endpoints too close", index)
        raise DegenerateGeometryError("Points are too close together to form an arc")
    bulge = bulge_from_sagitta(start.xy(), end.xy(), signed_sagitta_px)
    start.bulge = bulge
    return refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)


def drag_vertex(shape: Shape, handle: Handle, point: Sequence[float], settings: Optional[SketchSettings] = None) -> bool:
    """Move one handle of a shape to the (grid-snapped) pointer position.

    Rectangle handles are corner names and keep the opposite corner fixed; a
    drag past that corner moves the origin instead of producing a negative
    size. Circle handles are ``"radius"`` and ``"center"``. Polygon handles are
    vertex indices; the vertex keeps its bulge. Returns ``False`` when nothing
    changed.
    """
    cfg = _settings(settings)
    snap = GridSnap.from_settings(cfg)
    x, y = snap.point(point)
    geometry = shape.geometry

    if isinstance(geometry, Rectangle):
        if handle not in _OPPOSITE_CORNER:
            return False
        fixed = rectangle_corners(geometry)[_OPPOSITE_CORNER[handle]]
        width = abs(x - fixed.x)
        height = abs(y - fixed.y)
        if width == 0.0 or height == 0.0:
            return False
        geometry.x = min(x, fixed.x)
        geometry.y = min(y, fixed.y)
        geometry.width = width
        geometry.height = height
    elif isinstance(geometry, Circle):
        if handle == "radius":
            geometry.radius = snap.distance(math.hypot(float(point[0]) - geometry.cx, float(point[1]) - geometry.cy))
        elif handle == "center":
            geometry.cx, geometry.cy = x, y
        else:
            return False
    elif isinstance(geometry, Polygon):
        if not isinstance(handle, int) or not 0 <= handle < len(geometry.points):
            return False
        vertex = geometry.points[handle]
        vertex.x, vertex.y = x, y
    else:
        raise TypeError(f"Unsupported geometry {type(geometry).__name__}")

    refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)
    return True


def move_shape(shape: Shape, dx: float, dy: float, settings: Optional[SketchSettings] = None) -> None:
    cfg = _settings(settings)
    translate(shape.geometry, float(dx), float(dy))
    refresh_area(shape, cfg.grid_size, cfg.bulge_epsilon)


def handles(shape: Shape) -> List[Tuple[Handle, XY]]:
    """Drag handles and their positions, for the presentation layer."""
    geometry = shape.geometry
    if isinstance(geometry, Rectangle):
        corners = rectangle_corners(geometry)
        return [(name, corners[i].xy()) for i, name in enumerate(RECTANGLE_HANDLES)]
    if isinstance(geometry, Circle):
        return [("center", (geometry.cx, geometry.cy)), ("radius", (geometry.cx + geometry.radius, geometry.cy))]
    if isinstance(geometry, Polygon):
        return [(i, p.xy()) for i, p in enumerate(geometry.points)]
    raise TypeError(f"Unsupported geometry {type(geometry).__name__}")
