"""Shared fixtures for parcel sketch tests."""
import pytest

from parcelsketch_core.config import SketchSettings
from parcelsketch_core.shapes import Point, Polygon, Rectangle, Shape


def polygon_shape(*coords, bulges=None):
    """Polygon shape from (x, y) pairs; ``bulges`` maps vertex index to bulge."""
    bulges = bulges or {}
    points = [Point(float(x), float(y), bulges.get(i)) for i, (x, y) in enumerate(coords)]
    return Shape(geometry=Polygon(points=points))


@pytest.fixture
def settings():
    """Default settings: 10 px per foot, snapping on."""
    return SketchSettings()


@pytest.fixture
def square():
    """100 x 100 px square (100 sf), screen-space clockwise."""
    return polygon_shape((0, 0), (100, 0), (100, 100), (0, 100))


@pytest.fixture
def triangle():
    return polygon_shape((0, 0), (100, 0), (50, 80))


@pytest.fixture
def rectangle():
    """100 x 50 px rectangle (50 sf)."""
    return Shape(geometry=Rectangle(x=0.0, y=0.0, width=100.0, height=50.0))
