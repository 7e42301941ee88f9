"""Drawing tools for new sketch shapes.

Tools are framework-free: the editor forwards pointer positions that are
already in local sketch pixels (and already grid-snapped) and the tool calls
back into a ``ToolContext`` to add shapes or post status text.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .bulge import chord_length
from .shapes import Circle, Geometry, Point, Polygon, Rectangle
from .snap import GridSnap, constrain_to_right_angle, prior_segment_direction

XY = Tuple[float, float]


@dataclass
class ToolContext:
    snap: Callable[[], GridSnap]
    add_shape: Callable[[Geometry], None]
    update_status: Callable[[str], None]
    constrain_active: Callable[[], bool]


class ToolBase:
    """Common interface every tool implements."""

    def __init__(self, ctx: ToolContext):
        self.ctx = ctx
        self.preview: Optional[Geometry] = None

    def mouse_press(self, point: XY) -> None:
        pass

    def mouse_move(self, point: XY) -> None:
        pass

    def finish(self) -> bool:
        return False

    def deactivate(self) -> None:
        self.preview = None

    @property
    def busy(self) -> bool:
        return False


def rectangle_from_drag(start: XY, end: XY, snap: GridSnap) -> Rectangle:
    """Rectangle spanned by a drag; dragging up/left moves the origin instead of flipping the size."""
    width = snap.distance(abs(end[0] - start[0]))
    height = snap.distance(abs(end[1] - start[1]))
    x = start[0] - width if end[0] < start[0] else start[0]
    y = start[1] - height if end[1] < start[1] else start[1]
    return Rectangle(x=x, y=y, width=width, height=height)


def circle_from_drag(center: XY, edge: XY, snap: GridSnap) -> Circle:
    radius = snap.distance(math.hypot(edge[0] - center[0], edge[1] - center[1]))
    return Circle(cx=center[0], cy=center[1], radius=radius)


class RectangleTool(ToolBase):
    """Two-click rectangle: first corner, then opposite corner."""

    def __init__(self, ctx: ToolContext):
        super().__init__(ctx)
        self._start: XY | None = None

    @property
    def busy(self) -> bool:
        return self._start is not None

    def mouse_press(self, point: XY) -> None:
        if self._start is None:
            self._start = point
            self.ctx.update_status("Rectangle: click the opposite corner")
            return
        rect = rectangle_from_drag(self._start, point, self.ctx.snap())
        if rect.width <= 0.0 or rect.height <= 0.0:
            self.ctx.update_status("Rectangle too small")
            return
        self.ctx.add_shape(rect)
        self.deactivate()

    def mouse_move(self, point: XY) -> None:
        if self._start is not None:
            self.preview = rectangle_from_drag(self._start, point, self.ctx.snap())

    def deactivate(self) -> None:
        super().deactivate()
        self._start = None


class CircleTool(ToolBase):
    """Two-click circle: centre, then a point on the rim."""

    def __init__(self, ctx: ToolContext):
        super().__init__(ctx)
        self._center: XY | None = None

    @property
    def busy(self) -> bool:
        return self._center is not None

    def mouse_press(self, point: XY) -> None:
        if self._center is None:
            self._center = point
            self.ctx.update_status("Circle: click to set the radius")
            return
        circle = circle_from_drag(self._center, point, self.ctx.snap())
        if circle.radius <= 0.0:
            self.ctx.update_status("Circle radius too small")
            return
        self.ctx.add_shape(circle)
        self.deactivate()

    def mouse_move(self, point: XY) -> None:
        if self._center is not None:
            self.preview = circle_from_drag(self._center, point, self.ctx.snap())

    def deactivate(self) -> None:
        super().deactivate()
        self._center = None


class PolygonTool(ToolBase):
    """Click vertices one by one; ``finish`` closes the polygon (needs three points)."""

    def __init__(self, ctx: ToolContext):
        super().__init__(ctx)
        self._points: List[XY] = []

    @property
    def busy(self) -> bool:
        return bool(self._points)

    @property
    def points(self) -> List[XY]:
        return list(self._points)

    def _constrained(self, point: XY) -> XY:
        if not self._points or not self.ctx.constrain_active():
            return point
        return constrain_to_right_angle(point, self._points[-1], prior_segment_direction(self._points))

    def mouse_press(self, point: XY) -> None:
        candidate = self._constrained(point)
        if self._points and chord_length(candidate, self._points[-1]) == 0.0:
            return
        self._points.append(candidate)
        self.preview = Polygon(points=[Point(x, y) for x, y in self._points])
        if len(self._points) >= 3:
            self.ctx.update_status("Polygon: right-click to finish")

    def mouse_move(self, point: XY) -> None:
        if not self._points:
            return
        candidate = self._constrained(point)
        self.preview = Polygon(points=[Point(x, y) for x, y in (*self._points, candidate)])

    def finish(self) -> bool:
        if len(self._points) < 3:
            self.ctx.update_status("Polygon needs at least three points")
            return False
        self.ctx.add_shape(Polygon(points=[Point(x, y) for x, y in self._points]))
        self.deactivate()
        return True

    def deactivate(self) -> None:
        super().deactivate()
        self._points = []
