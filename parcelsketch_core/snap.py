"""Grid snapping and right-angle constraints for pointer input.

``GridSnap`` rounds points and distances to the sketch grid (relative to the
grid origin). ``constrain_to_right_angle`` is the drafting aid applied while
the constrain modifier is held: it keeps a new polygon edge perpendicular to
the previous one, or axis-aligned when there is no previous edge.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import SketchSettings

Point = Tuple[float, float]


def round_half_up(value: float) -> float:
    """Round to the nearest integer with halves going up (``round(2.5) == 3``, ``round(-2.5) == -2``)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class GridSnap:
    grid_size: float = 10.0
    origin: Point = (0.0, 0.0)
    enabled: bool = True

    @classmethod
    def from_settings(cls, settings: SketchSettings) -> "GridSnap":
        return cls(grid_size=settings.grid_size, origin=settings.grid_origin, enabled=settings.snap_enabled)

    def point(self, p: Sequence[float]) -> Point:
        return snap_to_grid(p, self.origin, self.grid_size, enabled=self.enabled)

    def distance(self, d: float) -> float:
        if not self.enabled:
            return float(d)
        return snap_distance(d, self.grid_size)


def snap_to_grid(p: Sequence[float], origin: Sequence[float], grid_size: float, *, enabled: bool = True) -> Point:
    """Round ``p`` to the nearest grid intersection measured from ``origin``."""
    px, py = float(p[0]), float(p[1])
    if not enabled:
        return (px, py)
    ox, oy = float(origin[0]), float(origin[1])
    sx = round_half_up((px - ox) / grid_size) * grid_size
    sy = round_half_up((py - oy) / grid_size) * grid_size
    return (sx + ox, sy + oy)


def snap_distance(d: float, grid_size: float) -> float:
    return round_half_up(float(d) / grid_size) * grid_size


def constrain_to_right_angle(
    candidate: Sequence[float],
    reference: Sequence[float],
    prior_direction: Optional[Sequence[float]] = None,
) -> Point:
    """Lock ``candidate`` to a right angle relative to ``reference``.

    With ``prior_direction`` (vector of the previous polygon edge) the result
    lies on the perpendicular through ``reference``, at the projected length
    of reference→candidate. Without it the larger of the horizontal and
    vertical deltas wins; ties lock vertically.
    """
    cx, cy = float(candidate[0]), float(candidate[1])
    rx, ry = float(reference[0]), float(reference[1])
    mx, my = cx - rx, cy - ry

    if prior_direction is not None:
        dx, dy = float(prior_direction[0]), float(prior_direction[1])
        # The two perpendiculars are (-dy, dx) and (dy, -dx).
        perps = ((-dy, dx), (dy, -dx))
        dots = [mx * px + my * py for px, py in perps]
        px, py = perps[0] if abs(dots[0]) > abs(dots[1]) else perps[1]
        length = math.hypot(px, py)
        if length == 0.0:
            return (cx, cy)
        nx, ny = px / length, py / length
        projection = mx * nx + my * ny
        return (rx + nx * projection, ry + ny * projection)

    if abs(mx) > abs(my):
        return (cx, ry)
    return (rx, cy)


def prior_segment_direction(points: Sequence[Sequence[float]]) -> Optional[Point]:
    """Direction of the last edge of an open polyline, or ``None`` with fewer than two points."""
    if len(points) < 2:
        return None
    a, b = points[-2], points[-1]
    return (float(b[0]) - float(a[0]), float(b[1]) - float(a[1]))
