"""Pydantic request/response models for the sketch API."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from parcelsketch_core.edit_ops import RECTANGLE_HANDLES

ShapeTypeLiteral = Literal["rectangle", "circle", "polygon"]


class SketchCreate(BaseModel):
    name: str = Field(default="Sketch", max_length=100, description="Sketch name")
    grid_size: float = Field(default=10.0, gt=0.0, description="Pixels per foot")
    snap_enabled: bool = Field(default=True, description="Snap edits to the grid")


class SketchResponse(BaseModel):
    id: str
    name: str
    created_at: str
    updated_at: str
    grid_size: float
    shapes: List[Dict[str, Any]]
    total_area: float
    total_effective_area: float
    description_codes: List[str]
    area_range: Dict[str, float]


class DescriptionIn(BaseModel):
    label: str = Field(..., min_length=1, max_length=3)
    effective_area: float = 0.0


class ShapeCreate(BaseModel):
    type: ShapeTypeLiteral
    coordinates: Dict[str, Any] = Field(..., description="Coordinates in local sketch pixels")
    descriptions: List[DescriptionIn] = Field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.type, "coordinates": self.coordinates}
        if self.descriptions:
            d["descriptions"] = [desc.model_dump() for desc in self.descriptions]
        return d


class EditRequest(BaseModel):
    operation: str
    payload: Dict[str, Any] = Field(default_factory=dict)


# -- edit payloads -----------------------------------------------------------


class ShapeRef(BaseModel):
    shape_index: int = Field(..., ge=0)


class InsertVertexPayload(ShapeRef):
    after_index: int
    x: float
    y: float


class SetBulgePayload(ShapeRef):
    vertex_index: int = Field(..., ge=0)
    bulge: Optional[float] = None


class ApplySagittaPayload(ShapeRef):
    vertex_index: int = Field(..., ge=0)
    sagitta_ft: float = Field(..., description="Arc depth in feet; the sign picks the side")


class DragVertexPayload(ShapeRef):
    handle: Union[int, str]
    x: float
    y: float

    @field_validator("handle")
    @classmethod
    def _check_handle(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and value not in (*RECTANGLE_HANDLES, "radius", "center"):
            raise ValueError(f"Unknown handle {value!r}")
        return value


class MoveShapePayload(ShapeRef):
    dx: float
    dy: float


class ConvertPayload(ShapeRef):
    pass


class FindEdgePayload(BaseModel):
    x: float
    y: float
    threshold: Optional[float] = Field(default=None, gt=0.0)


class OutlineItem(BaseModel):
    index: int
    type: ShapeTypeLiteral
    path: str
    bounds: Dict[str, float]
    area: float
    edge_lengths_ft: List[float]
