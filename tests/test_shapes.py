"""Tests for parcelsketch_core/shapes.py and sketch.py: records and persistence."""
import pytest

from parcelsketch_core.config import SketchSettings
from parcelsketch_core.errors import SketchSchemaError
from parcelsketch_core.shapes import (
    Circle,
    Point,
    Polygon,
    Rectangle,
    Shape,
    SubArea,
    centroid,
    copy_geometry,
    translate,
)
from parcelsketch_core.sketch import Sketch


class TestPointPersistence:
    def test_absent_bulge_is_not_written(self):
        assert Point(1, 2).to_dict() == {"x": 1.0, "y": 2.0}

    def test_zero_bulge_survives(self):
        d = Point(1, 2, 0.0).to_dict()
        assert d == {"x": 1.0, "y": 2.0, "bulge": 0.0}
        assert Point.from_dict(d).bulge == 0.0

    def test_missing_bulge_reads_as_none(self):
        assert Point.from_dict({"x": 1, "y": 2}).bulge is None

    def test_bad_point(self):
        with pytest.raises(SketchSchemaError):
            Point.from_dict({"x": "left", "y": 2})
        with pytest.raises(SketchSchemaError):
            Point.from_dict([1, 2])


class TestShapePersistence:
    def test_polygon_round_trip(self):
        data = {
            "type": "polygon",
            "coordinates": {"points": [{"x": 0, "y": 0, "bulge": 0.41}, {"x": 100, "y": 0}, {"x": 50, "y": 80}]},
            "area": 42.0,
            "descriptions": [{"label": "ffl", "effective_area": 40}],
            "_id": "abc",
        }
        shape = Shape.from_dict(data)
        out = shape.to_dict()
        assert out["coordinates"] == {
            "points": [{"x": 0.0, "y": 0.0, "bulge": 0.41}, {"x": 100.0, "y": 0.0}, {"x": 50.0, "y": 80.0}]
        }
        assert out["area"] == 42.0
        assert out["descriptions"] == [{"label": "FFL", "effective_area": 40.0}]
        assert out["id"] == "abc"

    def test_rectangle_and_circle(self):
        rect = Shape.from_dict({"type": "rectangle", "coordinates": {"x": 1, "y": 2, "width": 3, "height": 4}})
        assert rect.geometry == Rectangle(1, 2, 3, 4)
        circle = Shape.from_dict({"type": "circle", "coordinates": {"cx": 1, "cy": 2, "radius": 3}})
        assert circle.to_dict() == {"type": "circle", "coordinates": {"cx": 1.0, "cy": 2.0, "radius": 3.0}, "area": 0.0}

    def test_string_descriptions(self):
        shape = Shape.from_dict({"type": "circle", "coordinates": {"cx": 0, "cy": 0, "radius": 1}, "descriptions": ["gar"]})
        assert shape.descriptions == [SubArea("GAR")]

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "hexagon", "coordinates": {}},
            {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": -1, "height": 4}},
            {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 0, "height": 4}},
            {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 5, "height": 0}},
            {"type": "polygon", "coordinates": {"points": [{"x": 0, "y": 0}, {"x": 10, "y": 0}]}},
            {"type": "polygon", "coordinates": {"points": []}},
            {"type": "circle", "coordinates": {"cx": 0, "cy": 0, "radius": float("nan")}},
            {"type": "polygon", "coordinates": {"points": "nope"}},
            {"type": "polygon", "coordinates": None},
            {"type": "rectangle", "coordinates": {"x": True, "y": 0, "width": 1, "height": 1}},
            {"type": "circle", "coordinates": {"cx": 0, "cy": 0, "radius": 1}, "descriptions": [7]},
            "not a shape",
        ],
    )
    def test_invalid_shapes(self, data):
        with pytest.raises(SketchSchemaError):
            Shape.from_dict(data)


class TestSubArea:
    def test_label_rules(self):
        assert SubArea(" ffl ").label == "FFL"
        with pytest.raises(SketchSchemaError):
            SubArea("")
        with pytest.raises(SketchSchemaError):
            SubArea("PORCH")

    def test_from_factor_rounds(self):
        assert SubArea.from_factor("GAR", 123.4, 0.5).effective_area == 62.0


class TestShapeGeometry:
    def test_translate(self):
        poly = Polygon(points=[Point(0, 0, 0.2), Point(10, 0)])
        translate(poly, 5, 5)
        assert [p.xy() for p in poly.points] == [(5, 5), (15, 5)]
        assert poly.points[0].bulge == 0.2

    def test_centroid(self):
        assert centroid(Rectangle(0, 0, 10, 20)) == (5, 10)
        assert centroid(Circle(3, 4, 1)) == (3, 4)
        assert centroid(Polygon(points=[Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)])) == (5, 5)

    def test_copy_is_independent(self):
        poly = Polygon(points=[Point(0, 0, 0.3)])
        clone = copy_geometry(poly)
        clone.points[0].x = 99
        assert poly.points[0].x == 0

    def test_shape_identity(self):
        a = Shape(geometry=Circle(0, 0, 1))
        b = Shape(geometry=Circle(0, 0, 1))
        assert a != b
        assert a == a


class TestSketch:
    def test_from_dict_recomputes_area(self):
        sketch = Sketch.from_dict(
            {
                "name": "Card 1",
                "shapes": [
                    {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 100, "height": 50}, "area": 999,
                     "descriptions": [{"label": "FFL", "effective_area": 50}]},
                    {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 100, "height": 100},
                     "descriptions": ["GAR"]},
                ],
            },
            SketchSettings(),
        )
        assert [s.area for s in sketch.shapes] == [50.0, 100.0]
        assert sketch.total_area == 150.0
        assert sketch.total_effective_area == 50.0
        assert sketch.description_codes == ["FFL", "GAR"]
        assert sketch.area_range == (50.0, 100.0)
        assert sketch.description_totals() == {
            "FFL": {"total_area": 50, "effective_area": 50},
            "GAR": {"total_area": 100, "effective_area": 0},
        }

    def test_to_dict(self):
        sketch = Sketch(name="Empty", id="s1")
        d = sketch.to_dict()
        assert d["total_area"] == 0
        assert d["area_range"] == {"min": 0.0, "max": 0.0}
        assert d["id"] == "s1"

    def test_invalid(self):
        with pytest.raises(SketchSchemaError):
            Sketch.from_dict([])
        with pytest.raises(SketchSchemaError):
            Sketch.from_dict({"shapes": {}})
