"""Parcel sketch geometry core: shapes, bulge arcs, snapping, edge edits and area."""
from __future__ import annotations

from .arc_tool import (
    ArcEditRequest,
    ArcOutcome,
    ArcSegmentTool,
    ArcState,
    ArcStep,
    AwaitingEnd,
    AwaitingRadius,
    Idle,
    arc_click,
    arc_preview,
)
from .bulge import ArcParams, arc_from_bulge, bulge_from_cursor, bulge_from_sagitta
from .config import SketchSettings
from .edit_ops import (
    EdgeHit,
    apply_sagitta,
    convert_rectangle_to_polygon,
    drag_vertex,
    find_closest_edge,
    insert_vertex,
    move_shape,
    point_to_segment_distance,
    set_bulge,
)
from .editor import SketchChange, SketchEditor
from .errors import DegenerateGeometryError, SketchConfigError, SketchError, SketchSchemaError
from .geometry import outline, polygon_area, refresh_area, sample_outline, svg_path
from .shapes import Bounds, Circle, Point, Polygon, Rectangle, Shape, SubArea, get_bounds, to_polygon, translate
from .sketch import Sketch
from .snap import GridSnap, constrain_to_right_angle, snap_distance, snap_to_grid
from .units import to_display_area, to_display_length

__version__ = "0.1.0"

__all__ = [
    "ArcEditRequest",
    "ArcOutcome",
    "ArcParams",
    "ArcSegmentTool",
    "ArcState",
    "ArcStep",
    "AwaitingEnd",
    "AwaitingRadius",
    "Bounds",
    "Circle",
    "DegenerateGeometryError",
    "EdgeHit",
    "GridSnap",
    "Idle",
    "Point",
    "Polygon",
    "Rectangle",
    "Shape",
    "Sketch",
    "SketchChange",
    "SketchConfigError",
    "SketchEditor",
    "SketchError",
    "SketchSchemaError",
    "SketchSettings",
    "SubArea",
    "apply_sagitta",
    "arc_click",
    "arc_from_bulge",
    "arc_preview",
    "bulge_from_cursor",
    "bulge_from_sagitta",
    "constrain_to_right_angle",
    "convert_rectangle_to_polygon",
    "drag_vertex",
    "find_closest_edge",
    "get_bounds",
    "insert_vertex",
    "move_shape",
    "outline",
    "point_to_segment_distance",
    "polygon_area",
    "refresh_area",
    "sample_outline",
    "set_bulge",
    "snap_distance",
    "snap_to_grid",
    "svg_path",
    "to_display_area",
    "to_display_length",
    "to_polygon",
    "translate",
]
