"""Three-click workflow that turns a stretch of polygon boundary into an arc.

1. Click an edge: a vertex is inserted there (the arc start).
2. Click an edge of the same shape: a second vertex is inserted (the arc end).
3. Click anywhere: the cursor's distance from the start→end chord sets the
   bulge, stored on whichever of the two vertices comes first in the point
   list.

The workflow state is an immutable value (``Idle``, ``AwaitingEnd``,
``AwaitingRadius``). ``arc_click`` takes a state and a pointer position and
returns the next state together with what happened, so the index shifting in
step 2 can be tested without any UI. ``ArcSegmentTool`` wraps it for the
editor.

Rectangles are converted to polygons the first time one of their edges is
clicked. Cancelling keeps any vertices already inserted; they simply remain
straight-edge points.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from .bulge import arc_from_bulge, bulge_from_cursor, chord_length, is_curved
from .config import SketchSettings
from .edit_ops import convert_rectangle_to_polygon, find_closest_edge, insert_vertex
from .geometry import refresh_area
from .shapes import Polygon, Rectangle, Shape
from .units import to_display_length

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    step: int = field(default=0, init=False)


@dataclass(frozen=True)
class AwaitingEnd:
    shape: Shape
    start_index: int
    step: int = field(default=1, init=False)


@dataclass(frozen=True)
class AwaitingRadius:
    shape: Shape
    start_index: int
    end_index: int
    reversed: bool
    step: int = field(default=2, init=False)

    @property
    def earlier_index(self) -> int:
        """Vertex that carries the bulge (first of the pair in array order)."""
        return self.end_index if self.reversed else self.start_index

    @property
    def later_index(self) -> int:
        return self.start_index if self.reversed else self.end_index


ArcState = Union[Idle, AwaitingEnd, AwaitingRadius]


class ArcOutcome(str, Enum):
    STARTED = "started"
    EDIT_EXISTING = "edit-existing"
    NO_EDGE = "no-edge"
    WRONG_SHAPE = "wrong-shape"
    INSERT_FAILED = "insert-failed"
    AWAITING_RADIUS = "awaiting-radius"
    TOO_CLOSE = "too-close"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ArcEditRequest:
    """Existing arc handed to an external editor for numeric adjustment."""

    shape: Shape
    vertex_index: int
    bulge: float
    sagitta_px: float       # signed like the bulge
    sagitta_ft: float


@dataclass(frozen=True)
class ArcStep:
    state: ArcState
    outcome: ArcOutcome
    message: str = ""
    shape: Optional[Shape] = None
    edit_request: Optional[ArcEditRequest] = None

    @property
    def changed(self) -> bool:
        """True when shape coordinates were mutated by this step."""
        return self.outcome in (ArcOutcome.STARTED, ArcOutcome.AWAITING_RADIUS, ArcOutcome.COMPLETED)


def _edit_request(shape: Shape, index: int, settings: SketchSettings) -> Optional[ArcEditRequest]:
    points = shape.geometry.points  # type: ignore[union-attr]
    start = points[index]
    end = points[(index + 1) % len(points)]
    if chord_length(start.xy(), end.xy()) == 0.0:
        return None
    arc = arc_from_bulge(start.xy(), end.xy(), start.bulge)
    signed = arc.sagitta if start.bulge > 0 else -arc.sagitta
    return ArcEditRequest(
        shape=shape,
        vertex_index=index,
        bulge=float(start.bulge),
        sagitta_px=signed,
        sagitta_ft=to_display_length(signed, settings.grid_size),
    )


def _click_idle(shapes: Sequence[Shape], p: Sequence[float], settings: SketchSettings) -> ArcStep:
    hit = find_closest_edge(shapes, p, settings.edge_hit_threshold)
    if hit is None:
        return ArcStep(Idle(), ArcOutcome.NO_EDGE, "Click on a polygon or rectangle edge to start an arc")
    shape = hit.shape
    if isinstance(shape.geometry, Polygon):
        start_vertex = shape.geometry.points[hit.edge_index]
        if is_curved(start_vertex.bulge, settings.bulge_epsilon):
            request = _edit_request(shape, hit.edge_index, settings)
            if request is not None:
                return ArcStep(Idle(), ArcOutcome.EDIT_EXISTING, "Editing existing arc", shape, request)
    if isinstance(shape.geometry, Rectangle):
        convert_rectangle_to_polygon(shape, settings)
    start_index = insert_vertex(shape, hit.edge_index, hit.insert_point, settings)
    if start_index < 0:
        return ArcStep(Idle(), ArcOutcome.INSERT_FAILED, "Could not add an arc start point here")
    log.debug("Arc start at vertex %d of shape %d", start_index, hit.shape_index)
    return ArcStep(AwaitingEnd(shape, start_index), ArcOutcome.STARTED, "Click the arc end point", shape)


def _click_awaiting_end(
    state: AwaitingEnd, shapes: Sequence[Shape], p: Sequence[float], settings: SketchSettings
) -> ArcStep:
    hit = find_closest_edge(shapes, p, settings.edge_hit_threshold)
    if hit is None:
        return ArcStep(state, ArcOutcome.NO_EDGE, "Click on an edge of the same shape to end the arc")
    if hit.shape is not state.shape:
        return ArcStep(state, ArcOutcome.WRONG_SHAPE, "Arc end must be on the same shape as the start")
    end_index = insert_vertex(state.shape, hit.edge_index, hit.insert_point, settings)
    if end_index < 0:
        return ArcStep(state, ArcOutcome.INSERT_FAILED, "Could not add an arc end point here")
    start_index = state.start_index
    reversed_ = False
    if end_index <= start_index:
        # The new vertex landed before the start, pushing it one slot later.
        start_index += 1
        reversed_ = True
    log.debug("Arc end at vertex %d (start %d, reversed=%s)", end_index, start_index, reversed_)
    return ArcStep(
        AwaitingRadius(state.shape, start_index, end_index, reversed_),
        ArcOutcome.AWAITING_RADIUS,
        "Move to set the curve, then click",
        state.shape,
    )


def _click_awaiting_radius(state: AwaitingRadius, p: Sequence[float], settings: SketchSettings) -> ArcStep:
    shape = state.shape
    points = shape.geometry.points  # type: ignore[union-attr]
    earlier = points[state.earlier_index]
    later = points[state.later_index]
    if chord_length(earlier.xy(), later.xy()) < settings.min_arc_chord:
        log.warning("Arc aborted: start and end points are too close")
        return ArcStep(Idle(), ArcOutcome.TOO_CLOSE, "Points are too close together to form an arc", shape)
    bulge = bulge_from_cursor(earlier.xy(), later.xy(), p, settings.straight_sagitta)
    earlier.bulge = bulge
    refresh_area(shape, settings.grid_size, settings.bulge_epsilon)
    log.debug("Arc completed: bulge %.6f on vertex %d", bulge, state.earlier_index)
    return ArcStep(Idle(), ArcOutcome.COMPLETED, "Arc created", shape)


def arc_click(
    state: ArcState,
    shapes: Sequence[Shape],
    p: Sequence[float],
    settings: Optional[SketchSettings] = None,
) -> ArcStep:
    """Advance the workflow by one confirmed click at ``p`` (local pixel space)."""
    cfg = settings if settings is not None else SketchSettings()
    if isinstance(state, Idle):
        return _click_idle(shapes, p, cfg)
    if isinstance(state, AwaitingEnd):
        return _click_awaiting_end(state, shapes, p, cfg)
    if isinstance(state, AwaitingRadius):
        return _click_awaiting_radius(state, p, cfg)
    raise TypeError(f"Unknown arc workflow state {state!r}")


def arc_preview(state: ArcState, p: Sequence[float], settings: Optional[SketchSettings] = None) -> Optional[float]:
    """Bulge the final click would produce at ``p``, or ``None`` outside step 3."""
    if not isinstance(state, AwaitingRadius):
        return None
    cfg = settings if settings is not None else SketchSettings()
    points = state.shape.geometry.points  # type: ignore[union-attr]
    earlier = points[state.earlier_index]
    later = points[state.later_index]
    if chord_length(earlier.xy(), later.xy()) < cfg.min_arc_chord:
        return None
    return bulge_from_cursor(earlier.xy(), later.xy(), p, cfg.straight_sagitta)


class ArcSegmentTool:
    """Holds the workflow state between pointer events for the editor."""

    def __init__(self, settings: Optional[SketchSettings] = None):
        self.settings = settings if settings is not None else SketchSettings()
        self.state: ArcState = Idle()

    @property
    def step(self) -> int:
        return self.state.step

    def click(self, shapes: Sequence[Shape], p: Sequence[float]) -> ArcStep:
        result = arc_click(self.state, shapes, p, self.settings)
        self.state = result.state
        return result

    def preview(self, p: Sequence[float]) -> Optional[float]:
        return arc_preview(self.state, p, self.settings)

    def cancel(self) -> ArcStep:
        shape = getattr(self.state, "shape", None)
        self.state = Idle()
        return ArcStep(Idle(), ArcOutcome.CANCELLED, "", shape)
