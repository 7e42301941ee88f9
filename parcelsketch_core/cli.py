"""Command line interface for inspecting persisted parcel sketches."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from .config import SketchSettings
from .geometry import edge_lengths, svg_path
from .log import setup_logging
from .shapes import get_bounds
from .sketch import Sketch
from .units import format_area

log = logging.getLogger(__name__)


def _read_sketch(path: Path, settings: SketchSettings) -> Sketch:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if isinstance(data, list):
        data = {"name": path.stem, "shapes": data}
    return Sketch.from_dict(data, settings)


def _settings(args: argparse.Namespace) -> SketchSettings:
    settings = SketchSettings.from_env()
    if args.grid_size is not None:
        settings = SketchSettings.from_dict({**settings.asdict(), "grid_size": args.grid_size})
    return settings


def _cmd_area(args: argparse.Namespace) -> None:
    settings = _settings(args)
    sketch = _read_sketch(Path(args.file), settings)
    if args.json:
        print(json.dumps(sketch.to_dict(), indent=2))
        return
    print(f"{sketch.name}: {len(sketch.shapes)} shapes")
    for i, shape in enumerate(sketch.shapes):
        labels = ", ".join(d.label for d in shape.descriptions)
        suffix = f" [{labels}]" if labels else ""
        print(f"  {i:>3} {shape.type:<9} {format_area(shape.area):>10}{suffix}")
    print(f"Total: {format_area(sketch.total_area)}")
    for label, totals in sketch.description_totals().items():
        print(f"  {label}: {totals['total_area']} sf raw, {totals['effective_area']} sf effective")


def _cmd_bounds(args: argparse.Namespace) -> None:
    settings = _settings(args)
    sketch = _read_sketch(Path(args.file), settings)
    for i, shape in enumerate(sketch.shapes):
        b = get_bounds(shape.geometry)
        print(f"{i} {shape.type} min=({b.min_x:g}, {b.min_y:g}) max=({b.max_x:g}, {b.max_y:g})")


def _cmd_outline(args: argparse.Namespace) -> None:
    settings = _settings(args)
    sketch = _read_sketch(Path(args.file), settings)
    for i, shape in enumerate(sketch.shapes):
        print(f"{i} {shape.type}: {svg_path(shape.geometry, settings.bulge_epsilon)}")
        if args.edges:
            lengths: List[str] = [f"{v:g}'" for v in edge_lengths(shape.geometry, settings.grid_size, settings.bulge_epsilon)]
            print("    edges: " + " ".join(lengths))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parcelsketch",
        description="Inspect parcel sketch JSON files (areas, bounds, outlines)",
    )
    parser.add_argument("--grid-size", dest="grid_size", type=float, help="Pixels per foot (default from settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    area = sub.add_parser("area", help="Print per-shape and total area in square feet")
    area.add_argument("file", help="Sketch JSON file ({name, shapes} or a bare shape list)")
    area.add_argument("--json", action="store_true", help="Emit the recomputed sketch as JSON")
    area.set_defaults(func=_cmd_area)

    bounds = sub.add_parser("bounds", help="Print the bounding box of every shape")
    bounds.add_argument("file")
    bounds.set_defaults(func=_cmd_bounds)

    outline = sub.add_parser("outline", help="Print SVG path data for every shape")
    outline.add_argument("file")
    outline.add_argument("--edges", action="store_true", help="Also print edge lengths in feet")
    outline.set_defaults(func=_cmd_outline)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        args.func(args)
    except (OSError, ValueError) as exc:
        log.debug("Command failed", exc_info=True)
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main(sys.argv[1:]))
