"""Sketch editor: owns the shape list and routes pointer input to tools.

The presentation layer forwards pointer positions in local sketch pixels
(pan/zoom already removed), the constrain modifier state and the drawing
mode. Every mutation is pushed to subscribed listeners as a ``SketchChange``
right after the shape's coordinates and area have been written, so a redraw
never has to poll or diff.

Handlers run to completion and are not re-entrant. A host that drives one
editor from several threads must serialise calls (one lock per editor).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Sequence

from .arc_tool import ArcEditRequest, ArcOutcome, ArcSegmentTool, ArcStep, AwaitingRadius
from .bulge import arc_from_bulge
from .config import SketchSettings
from .edit_ops import Handle, apply_sagitta, convert_rectangle_to_polygon, drag_vertex, move_shape, set_bulge
from .errors import SketchError
from .geometry import ArcSegment, refresh_area
from .shapes import Geometry, Shape
from .sketch import Sketch
from .snap import GridSnap
from .tools import CircleTool, PolygonTool, RectangleTool, ToolBase, ToolContext

log = logging.getLogger(__name__)

DrawingMode = Literal["rectangle", "circle", "polygon", "arc-segment", "none"]
DRAWING_MODES = ("rectangle", "circle", "polygon", "arc-segment", "none")
ChangeKind = Literal["added", "updated", "removed"]


@dataclass(frozen=True)
class SketchChange:
    kind: ChangeKind
    index: int
    shape: Shape


Listener = Callable[[SketchChange], None]
StatusListener = Callable[[str], None]


class SketchEditor:
    def __init__(self, sketch: Optional[Sketch] = None, settings: Optional[SketchSettings] = None):
        self.sketch = sketch if sketch is not None else Sketch()
        self.settings = settings if settings is not None else SketchSettings()
        self.mode: DrawingMode = "none"
        self.constrain = False
        self.status = ""
        self.pending_edit: Optional[ArcEditRequest] = None
        self.hover_arc: Optional[ArcSegment] = None
        self._listeners: List[Listener] = []
        self._status_listeners: List[StatusListener] = []
        ctx = ToolContext(
            snap=self.grid,
            add_shape=self.add_shape,
            update_status=self._post_status,
            constrain_active=lambda: self.constrain,
        )
        self._tools = {
            "rectangle": RectangleTool(ctx),
            "circle": CircleTool(ctx),
            "polygon": PolygonTool(ctx),
        }
        self.arc_tool = ArcSegmentTool(self.settings)

    # -- wiring -------------------------------------------------------------

    @property
    def shapes(self) -> List[Shape]:
        return self.sketch.shapes

    def grid(self) -> GridSnap:
        return GridSnap.from_settings(self.settings)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def subscribe_status(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def _notify(self, kind: ChangeKind, shape: Shape) -> None:
        index = next((i for i, s in enumerate(self.shapes) if s is shape), -1)
        change = SketchChange(kind=kind, index=index, shape=shape)
        for listener in list(self._listeners):
            listener(change)

    def _post_status(self, message: str) -> None:
        self.status = message
        for listener in list(self._status_listeners):
            listener(message)

    @property
    def active_tool(self) -> Optional[ToolBase]:
        return self._tools.get(self.mode)

    @property
    def preview(self) -> Optional[Geometry]:
        tool = self.active_tool
        return tool.preview if tool is not None else None

    # -- modes --------------------------------------------------------------

    def set_mode(self, mode: str) -> None:
        if mode not in DRAWING_MODES:
            raise ValueError(f"Unknown drawing mode {mode!r}; expected one of {', '.join(DRAWING_MODES)}")
        if mode == self.mode:
            return
        self.cancel()
        self.mode = mode  # type: ignore[assignment]
        log.debug("Drawing mode -> %s", mode)

    def set_constrain(self, active: bool) -> None:
        self.constrain = bool(active)

    def cancel(self) -> None:
        """Abandon the gesture in progress. Vertices already inserted stay."""
        tool = self.active_tool
        if tool is not None:
            tool.deactivate()
        self.arc_tool.cancel()
        self.hover_arc = None
        self.pending_edit = None

    # -- pointer input ------------------------------------------------------

    def click(self, x: float, y: float) -> Optional[ArcStep]:
        if self.mode == "none":
            return None
        if self.mode == "arc-segment":
            return self._arc_click((float(x), float(y)))
        point = self.grid().point((x, y))
        tool = self.active_tool
        if tool is not None:
            tool.mouse_press(point)
        return None

    def move(self, x: float, y: float) -> None:
        if self.mode == "arc-segment":
            self._update_hover_arc((float(x), float(y)))
            return
        tool = self.active_tool
        if tool is not None:
            tool.mouse_move(self.grid().point((x, y)))

    def finish_polygon(self) -> bool:
        tool = self._tools["polygon"]
        if self.mode != "polygon":
            return False
        return tool.finish()

    def _arc_click(self, p: Sequence[float]) -> ArcStep:
        step = self.arc_tool.click(self.shapes, p)
        self.hover_arc = None
        if step.outcome is ArcOutcome.EDIT_EXISTING:
            self.pending_edit = step.edit_request
        elif step.changed:
            # inserted vertices shift the indices a pending edit points at
            self.pending_edit = None
        if step.message:
            self._post_status(step.message)
        if step.changed and step.shape is not None:
            self._notify("updated", step.shape)
        return step

    def _update_hover_arc(self, p: Sequence[float]) -> None:
        state = self.arc_tool.state
        bulge = self.arc_tool.preview(p)
        if not isinstance(state, AwaitingRadius) or not bulge:
            self.hover_arc = None
            return
        points = state.shape.geometry.points  # type: ignore[union-attr]
        a = points[state.earlier_index].xy()
        b = points[state.later_index].xy()
        arc = arc_from_bulge(a, b, bulge)
        self.hover_arc = ArcSegment(
            start=a,
            end=b,
            radius=arc.radius,
            large_arc=arc.large_arc,
            sweep=arc.sweep,
            bulge=bulge,
            included_angle=arc.included_angle,
        )

    # -- shape mutations ----------------------------------------------------

    def add_shape(self, geometry: Geometry) -> Shape:
        shape = Shape(geometry=geometry)
        refresh_area(shape, self.settings.grid_size, self.settings.bulge_epsilon)
        self.shapes.append(shape)
        log.info("Added %s (%.1f sf)", shape.type, shape.area)
        self._post_status(f"Added {shape.type}")
        self._notify("added", shape)
        return shape

    def remove_shape(self, index: int) -> Optional[Shape]:
        if not 0 <= index < len(self.shapes):
            return None
        self.cancel()
        shape = self.shapes[index]
        change = SketchChange(kind="removed", index=index, shape=shape)
        del self.shapes[index]
        for listener in list(self._listeners):
            listener(change)
        return shape

    def _shape(self, index: int) -> Optional[Shape]:
        if 0 <= index < len(self.shapes):
            return self.shapes[index]
        return None

    def drag_vertex(self, shape_index: int, handle: Handle, x: float, y: float) -> bool:
        shape = self._shape(shape_index)
        if shape is None or not drag_vertex(shape, handle, (x, y), self.settings):
            return False
        self._notify("updated", shape)
        return True

    def move_shape(self, shape_index: int, dx: float, dy: float) -> bool:
        shape = self._shape(shape_index)
        if shape is None:
            return False
        move_shape(shape, dx, dy, self.settings)
        self._notify("updated", shape)
        return True

    def convert_to_polygon(self, shape_index: int) -> bool:
        shape = self._shape(shape_index)
        if shape is None or not convert_rectangle_to_polygon(shape, self.settings):
            return False
        self._notify("updated", shape)
        return True

    def set_bulge(self, shape_index: int, vertex_index: int, bulge: Optional[float]) -> bool:
        shape = self._shape(shape_index)
        if shape is None:
            return False
        try:
            set_bulge(shape, vertex_index, bulge, self.settings)
        except (SketchError, ValueError) as exc:
            self._post_status(str(exc))
            return False
        self._notify("updated", shape)
        return True

    def commit_arc_edit(self, signed_sagitta_ft: float) -> bool:
        """Apply a depth (feet, signed) entered for ``pending_edit``."""
        request = self.pending_edit
        if request is None:
            return False
        if not any(s is request.shape for s in self.shapes):
            self.pending_edit = None
            return False
        try:
            apply_sagitta(request.shape, request.vertex_index, signed_sagitta_ft * self.settings.grid_size, self.settings)
        except (SketchError, ValueError) as exc:
            self._post_status(str(exc))
            return False
        finally:
            self.pending_edit = None
        self._notify("updated", request.shape)
        return True
