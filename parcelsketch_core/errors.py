"""Typed errors raised by the sketch geometry core."""
from __future__ import annotations


class SketchError(Exception):
    """Base error for the sketch core."""


class DegenerateGeometryError(SketchError, ValueError):
    """Coincident points or a zero-length chord reached the arc math."""


class SketchSchemaError(SketchError, ValueError):
    """A persisted shape or sketch payload could not be parsed."""


class SketchConfigError(SketchError, ValueError):
    """Invalid sketch settings."""
