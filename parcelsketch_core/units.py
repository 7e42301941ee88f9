"""Pixel/foot conversion at the presentation boundary.

All interactive math runs in pixel space. A sketch has a single fixed scale
(the grid spacing), so one grid cell is one foot.
"""
from __future__ import annotations

DEFAULT_PIXELS_PER_UNIT = 10.0


def to_display_length(length_px: float, scale: float = DEFAULT_PIXELS_PER_UNIT) -> float:
    """Pixels to feet, rounded to one decimal."""
    return round(float(length_px) / scale, 1)


def to_display_area(area_px: float, scale: float = DEFAULT_PIXELS_PER_UNIT) -> float:
    """Square pixels to square feet (unrounded)."""
    return float(area_px) / (scale * scale)


def from_display_length(length_ft: float, scale: float = DEFAULT_PIXELS_PER_UNIT) -> float:
    return float(length_ft) * scale


def format_feet(length_px: float, scale: float = DEFAULT_PIXELS_PER_UNIT) -> str:
    """Edge label text, e.g. ``12.5'``."""
    value = to_display_length(length_px, scale)
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text}'"


def format_area(area_sqft: float) -> str:
    return f"{round(area_sqft)} sf"
