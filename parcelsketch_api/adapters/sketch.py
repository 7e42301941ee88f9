"""In-memory sketch store with hooks into the geometry core's edit operations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List
from uuid import uuid4

from parcelsketch_core import edit_ops
from parcelsketch_core.config import SketchSettings
from parcelsketch_core.geometry import edge_lengths, refresh_area, svg_path
from parcelsketch_core.shapes import Shape, get_bounds
from parcelsketch_core.sketch import Sketch

from .. import schemas

log = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SketchRecord:
    """Stored sketch with metadata."""

    id: str
    settings: SketchSettings
    sketch: Sketch
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


class SketchStore:
    """Simple store backing the sketch routes."""

    def __init__(self) -> None:
        self._items: Dict[str, SketchRecord] = {}

    def create(self, name: str, settings: SketchSettings) -> SketchRecord:
        sketch_id = str(uuid4())
        record = SketchRecord(id=sketch_id, settings=settings, sketch=Sketch(name=name, id=sketch_id))
        self._items[sketch_id] = record
        return record

    def list(self) -> List[SketchRecord]:
        return list(self._items.values())

    def get(self, sketch_id: str) -> SketchRecord:
        record = self._items.get(sketch_id)
        if record is None:
            raise KeyError(sketch_id)
        return record

    def delete(self, sketch_id: str) -> bool:
        return self._items.pop(sketch_id, None) is not None

    def clear(self) -> None:
        self._items.clear()


_store = SketchStore()


def get_store() -> SketchStore:
    return _store


def create_sketch(payload: Dict[str, Any]) -> Dict[str, Any]:
    settings = SketchSettings(grid_size=payload.get("grid_size", 10.0), snap_enabled=payload.get("snap_enabled", True))
    record = _store.create(name=payload.get("name", "Sketch"), settings=settings)
    log.info("Created sketch %s", record.id)
    return serialize_sketch(record)


def list_sketches() -> List[Dict[str, Any]]:
    return [serialize_sketch(item) for item in _store.list()]


def get_sketch(sketch_id: str) -> Dict[str, Any]:
    return serialize_sketch(_store.get(sketch_id))


def delete_sketch(sketch_id: str) -> None:
    if not _store.delete(sketch_id):
        raise KeyError(sketch_id)


def add_shape(sketch_id: str, shape_payload: Dict[str, Any]) -> Dict[str, Any]:
    record = _store.get(sketch_id)
    shape = Shape.from_dict(shape_payload)
    refresh_area(shape, record.settings.grid_size, record.settings.bulge_epsilon)
    record.sketch.shapes.append(shape)
    record.updated_at = _now()
    return {"index": len(record.sketch.shapes) - 1, "shape": shape.to_dict()}


def remove_shape(sketch_id: str, index: int) -> None:
    record = _store.get(sketch_id)
    if not 0 <= index < len(record.sketch.shapes):
        raise KeyError(index)
    del record.sketch.shapes[index]
    record.updated_at = _now()


def _shape_at(record: SketchRecord, index: int) -> Shape:
    shapes = record.sketch.shapes
    if not 0 <= index < len(shapes):
        raise ValueError(f"Shape index {index} out of range")
    return shapes[index]


def _insert_vertex(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.InsertVertexPayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    index = edit_ops.insert_vertex(shape, body.after_index, (body.x, body.y), record.settings)
    if index < 0:
        raise ValueError("Invalid insertion target: shape is not a polygon or the index is out of range")
    return {"index": index, "shape": shape.to_dict()}


def _set_bulge(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.SetBulgePayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    edit_ops.set_bulge(shape, body.vertex_index, body.bulge, record.settings)
    return {"shape": shape.to_dict()}


def _apply_sagitta(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.ApplySagittaPayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    sagitta_px = body.sagitta_ft * record.settings.grid_size
    edit_ops.apply_sagitta(shape, body.vertex_index, sagitta_px, record.settings)
    return {"shape": shape.to_dict()}


def _drag_vertex(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.DragVertexPayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    changed = edit_ops.drag_vertex(shape, body.handle, (body.x, body.y), record.settings)
    return {"changed": changed, "shape": shape.to_dict()}


def _move_shape(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.MoveShapePayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    edit_ops.move_shape(shape, body.dx, body.dy, record.settings)
    return {"shape": shape.to_dict()}


def _convert_rectangle(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.ConvertPayload.model_validate(payload)
    shape = _shape_at(record, body.shape_index)
    converted = edit_ops.convert_rectangle_to_polygon(shape, record.settings)
    return {"changed": converted, "shape": shape.to_dict()}


def _find_edge(record: SketchRecord, payload: Dict[str, Any]) -> Dict[str, Any]:
    body = schemas.FindEdgePayload.model_validate(payload)
    threshold = body.threshold if body.threshold is not None else record.settings.edge_hit_threshold
    hit = edit_ops.find_closest_edge(record.sketch.shapes, (body.x, body.y), threshold)
    if hit is None:
        return {"hit": None}
    return {
        "hit": {
            "shape_index": hit.shape_index,
            "edge_index": hit.edge_index,
            "edge_start": list(hit.edge_start),
            "edge_end": list(hit.edge_end),
            "insert_point": list(hit.insert_point),
            "distance": hit.distance,
        }
    }


EDIT_OPERATIONS: Dict[str, Callable[[SketchRecord, Dict[str, Any]], Dict[str, Any]]] = {
    "insert_vertex": _insert_vertex,
    "set_bulge": _set_bulge,
    "apply_sagitta": _apply_sagitta,
    "drag_vertex": _drag_vertex,
    "move_shape": _move_shape,
    "convert_rectangle": _convert_rectangle,
    "find_edge": _find_edge,
}


def run_edit(sketch_id: str, operation: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Dispatch an allow-listed edit operation against a stored sketch."""
    handler = EDIT_OPERATIONS.get(operation)
    if handler is None:
        raise ValueError(f"Unsupported edit operation '{operation}'")
    record = _store.get(sketch_id)
    result = handler(record, payload)
    if operation != "find_edge":
        record.updated_at = _now()
    log.debug("Edit %s on sketch %s", operation, sketch_id)
    return {"status": "ok", "result": result}


def outline_sketch(sketch_id: str) -> List[Dict[str, Any]]:
    record = _store.get(sketch_id)
    items: List[Dict[str, Any]] = []
    for i, shape in enumerate(record.sketch.shapes):
        b = get_bounds(shape.geometry)
        items.append(
            {
                "index": i,
                "type": shape.type,
                "path": svg_path(shape.geometry, record.settings.bulge_epsilon),
                "bounds": {"min_x": b.min_x, "min_y": b.min_y, "max_x": b.max_x, "max_y": b.max_y},
                "area": shape.area,
                "edge_lengths_ft": edge_lengths(shape.geometry, record.settings.grid_size, record.settings.bulge_epsilon),
            }
        )
    return items


def serialize_sketch(record: SketchRecord) -> Dict[str, Any]:
    sketch = record.sketch
    low, high = sketch.area_range
    return {
        "id": record.id,
        "name": sketch.name,
        "created_at": record.created_at.isoformat(),
        "updated_at": record.updated_at.isoformat(),
        "grid_size": record.settings.grid_size,
        "shapes": [s.to_dict() for s in sketch.shapes],
        "total_area": sketch.total_area,
        "total_effective_area": sketch.total_effective_area,
        "description_codes": sketch.description_codes,
        "area_range": {"min": low, "max": high},
    }
