"""Bulge-arc conversions for curved polygon edges.

A bulge is the DXF scalar ``tan(included_angle / 4)``. Its sign gives the
curve direction: positive bulges sweep with SVG ``sweep-flag = 1``. Zero (or
anything within ``BULGE_EPSILON``) means the edge is straight.

All functions are pure and work in pixel space.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .errors import DegenerateGeometryError

BULGE_EPSILON = 1e-4
STRAIGHT_SAGITTA_PX = 5.0
MIN_SAGITTA_PX = 0.01

PointLike = Sequence[float]


@dataclass(frozen=True)
class ArcParams:
    radius: float
    sagitta: float
    chord_length: float
    included_angle: float
    large_arc: bool
    sweep: bool

    @property
    def segment_area(self) -> float:
        """Area between the arc and its chord (px²)."""
        return circular_segment_area(self.radius, self.included_angle)


def is_curved(bulge: Optional[float], eps: float = BULGE_EPSILON) -> bool:
    return bulge is not None and abs(bulge) > eps


def chord_length(p0: PointLike, p1: PointLike) -> float:
    return math.hypot(float(p1[0]) - float(p0[0]), float(p1[1]) - float(p0[1]))


def signed_offset(p0: PointLike, p1: PointLike, cursor: PointLike) -> float:
    """Signed perpendicular distance of ``cursor`` from the line p0→p1.

    Sign of the cross product ``(cursor-p0) x (p1-p0)``: positive when the
    cursor lies on the side a positive bulge curves toward. Returns 0 for a
    zero-length chord.
    """
    dx = float(p1[0]) - float(p0[0])
    dy = float(p1[1]) - float(p0[1])
    length = math.hypot(dx, dy)
    if length == 0.0:
        return 0.0
    cross = (float(cursor[0]) - float(p0[0])) * dy - (float(cursor[1]) - float(p0[1])) * dx
    return cross / length


def circular_segment_area(radius: float, included_angle: float) -> float:
    return (radius * radius / 2.0) * (included_angle - math.sin(included_angle))


def arc_from_bulge(p0: PointLike, p1: PointLike, bulge: float) -> ArcParams:
    """Arc geometry for the edge p0→p1 carrying ``bulge``.

    Raises ``DegenerateGeometryError`` for coincident endpoints; callers are
    expected to reject such edges before getting here.
    """
    chord = chord_length(p0, p1)
    if chord == 0.0:
        raise DegenerateGeometryError("Cannot build an arc on a zero-length chord")
    included = 4.0 * math.atan(abs(bulge))
    half_sin = math.sin(included / 2.0)
    if half_sin == 0.0:
        raise DegenerateGeometryError(f"Bulge {bulge!r} describes a straight edge, not an arc")
    radius = chord / (2.0 * half_sin)
    sagitta = radius * (1.0 - math.cos(included / 2.0))
    return ArcParams(
        radius=radius,
        sagitta=sagitta,
        chord_length=chord,
        included_angle=included,
        large_arc=included > math.pi,
        sweep=bulge > 0,
    )


def bulge_from_cursor(
    p0: PointLike,
    p1: PointLike,
    cursor: PointLike,
    straight_threshold: float = STRAIGHT_SAGITTA_PX,
) -> float:
    """Bulge for an arc through p0 and p1 bowing toward ``cursor``.

    The cursor's distance from the chord is treated as the sagitta. Shallow
    positions (under ``straight_threshold`` px) snap to a straight edge. The
    result never exceeds a semicircle.
    """
    chord = chord_length(p0, p1)
    offset = signed_offset(p0, p1, cursor)
    sagitta = abs(offset)
    if chord == 0.0 or sagitta < straight_threshold:
        return 0.0
    radius = sagitta / 2.0 + chord * chord / (8.0 * sagitta)
    included = 2.0 * math.asin(min(1.0, chord / (2.0 * radius)))
    bulge = math.tan(included / 4.0)
    return bulge if offset > 0 else -bulge


def bulge_from_sagitta(p0: PointLike, p1: PointLike, signed_sagitta: float) -> float:
    """Bulge for a numeric arc depth entered by the user (pixels, signed).

    Depths beyond half the chord produce a major arc, so this is the exact
    inverse of ``arc_from_bulge(...).sagitta``.
    """
    sagitta = abs(signed_sagitta)
    chord = chord_length(p0, p1)
    if sagitta < MIN_SAGITTA_PX or chord == 0.0:
        return 0.0
    half_chord = chord / 2.0
    radius = (sagitta * sagitta + half_chord * half_chord) / (2.0 * sagitta)
    # atan2 keeps the angle past pi when the depth exceeds the half-chord.
    included = 2.0 * math.atan2(half_chord, radius - sagitta)
    bulge = math.tan(included / 4.0)
    return bulge if signed_sagitta > 0 else -bulge


def _bulge_side(p0: PointLike, p1: PointLike, bulge: float) -> tuple[ArcParams, tuple[float, float], tuple[float, float]]:
    arc = arc_from_bulge(p0, p1, bulge)
    mid = ((float(p0[0]) + float(p1[0])) / 2.0, (float(p0[1]) + float(p1[1])) / 2.0)
    ux = (float(p1[0]) - float(p0[0])) / arc.chord_length
    uy = (float(p1[1]) - float(p0[1])) / arc.chord_length
    side = 1.0 if bulge > 0 else -1.0
    return arc, mid, (uy * side, -ux * side)


def arc_apex(p0: PointLike, p1: PointLike, bulge: float) -> tuple[float, float]:
    """Point of the arc farthest from its chord."""
    arc, mid, normal = _bulge_side(p0, p1, bulge)
    return (mid[0] + normal[0] * arc.sagitta, mid[1] + normal[1] * arc.sagitta)


def arc_center(p0: PointLike, p1: PointLike, bulge: float) -> tuple[float, float]:
    """Centre of the circle the curved edge p0→p1 lies on."""
    arc, mid, normal = _bulge_side(p0, p1, bulge)
    offset = arc.sagitta - arc.radius
    return (mid[0] + normal[0] * offset, mid[1] + normal[1] * offset)
