"""Tests for parcelsketch_core/bulge.py: bulge <-> arc conversions."""
import math

import pytest

from parcelsketch_core.bulge import (
    arc_apex,
    arc_center,
    arc_from_bulge,
    bulge_from_cursor,
    bulge_from_sagitta,
    is_curved,
    signed_offset,
)
from parcelsketch_core.errors import DegenerateGeometryError


class TestArcFromBulge:
    def test_quarter_circle(self):
        arc = arc_from_bulge((0, 0), (100, 0), math.tan(math.pi / 8))
        assert abs(arc.included_angle - math.pi / 2) < 1e-12
        assert abs(arc.radius - 100 / math.sqrt(2)) < 1e-9
        assert arc.sweep is True
        assert arc.large_arc is False

    def test_semicircle(self):
        arc = arc_from_bulge((0, 0), (100, 0), -1.0)
        assert abs(arc.radius - 50.0) < 1e-9
        assert abs(arc.sagitta - 50.0) < 1e-9
        assert arc.sweep is False

    def test_major_arc_sets_large_flag(self):
        arc = arc_from_bulge((0, 0), (100, 0), 2.0)
        assert arc.included_angle > math.pi
        assert arc.large_arc is True

    def test_segment_area_of_semicircle(self):
        arc = arc_from_bulge((0, 0), (100, 0), 1.0)
        assert abs(arc.segment_area - math.pi * 50 * 50 / 2) < 1e-6

    def test_zero_chord_rejected(self):
        with pytest.raises(DegenerateGeometryError):
            arc_from_bulge((5, 5), (5, 5), 0.5)

    def test_zero_bulge_rejected(self):
        with pytest.raises(DegenerateGeometryError):
            arc_from_bulge((0, 0), (10, 0), 0.0)


class TestBulgeFromSagitta:
    def test_round_trip(self):
        for s in (3.0, 25.0, 50.0, 80.0, -12.5, -70.0):
            bulge = bulge_from_sagitta((0, 0), (100, 0), s)
            arc = arc_from_bulge((0, 0), (100, 0), bulge)
            assert abs(arc.sagitta - abs(s)) < 1e-9
            assert (bulge > 0) == (s > 0)

    def test_sagitta_equal_half_chord_is_semicircle(self):
        assert abs(bulge_from_sagitta((0, 0), (100, 0), 50.0) - 1.0) < 1e-12

    def test_tiny_sagitta_is_straight(self):
        assert bulge_from_sagitta((0, 0), (100, 0), 0.001) == 0.0

    def test_zero_chord_is_straight(self):
        assert bulge_from_sagitta((3, 3), (3, 3), 20.0) == 0.0


class TestBulgeFromCursor:
    # chord (50,0)->(80,40): length 50, unit normal for positive bulge (0.8, -0.6)
    def test_positive_side(self):
        bulge = bulge_from_cursor((50, 0), (80, 40), (73, 14))
        assert abs(bulge - 0.4) < 1e-9

    def test_negative_side(self):
        bulge = bulge_from_cursor((50, 0), (80, 40), (57, 26))
        assert abs(bulge + 0.4) < 1e-9

    def test_below_threshold_is_straight(self):
        assert bulge_from_cursor((0, 0), (100, 0), (50, 4.9)) == 0.0
        assert bulge_from_cursor((0, 0), (100, 0), (50, -4.9)) == 0.0

    def test_custom_threshold(self):
        assert bulge_from_cursor((0, 0), (100, 0), (50, 4.0), straight_threshold=2.0) != 0.0

    def test_capped_at_semicircle(self):
        at_half_chord = bulge_from_cursor((0, 0), (100, 0), (50, -50))
        assert abs(at_half_chord - 1.0) < 1e-12
        deeper = bulge_from_cursor((0, 0), (100, 0), (50, -500))
        assert 0.0 < deeper < 1.0

    def test_arc_bows_toward_cursor(self):
        cursor = (50, -30)
        bulge = bulge_from_cursor((0, 0), (100, 0), cursor)
        apex = arc_apex((0, 0), (100, 0), bulge)
        assert abs(apex[0] - 50) < 1e-9
        assert abs(apex[1] - cursor[1]) < 1e-9


class TestHelpers:
    def test_signed_offset_sides(self):
        assert signed_offset((0, 0), (100, 0), (50, -10)) == pytest.approx(10.0)
        assert signed_offset((0, 0), (100, 0), (50, 10)) == pytest.approx(-10.0)
        assert signed_offset((1, 1), (1, 1), (5, 5)) == 0.0

    def test_is_curved(self):
        assert not is_curved(None)
        assert not is_curved(0.0)
        assert not is_curved(5e-5)
        assert is_curved(-0.2)

    def test_center_is_radius_from_endpoints(self):
        bulge = 0.3
        c = arc_center((0, 0), (100, 0), bulge)
        r = arc_from_bulge((0, 0), (100, 0), bulge).radius
        assert abs(math.hypot(c[0], c[1]) - r) < 1e-9
        assert abs(math.hypot(c[0] - 100, c[1]) - r) < 1e-9
