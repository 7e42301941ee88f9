from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, status

from ..adapters import sketch as sketch_adapter
from ..schemas import EditRequest, OutlineItem, ShapeCreate, SketchCreate, SketchResponse

router = APIRouter(prefix="/sketches", tags=["sketches"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sketch not found")


@router.get("/", response_model=List[SketchResponse])
async def list_sketches() -> List[SketchResponse]:
    return [SketchResponse(**item) for item in sketch_adapter.list_sketches()]


@router.post("/", response_model=SketchResponse, status_code=status.HTTP_201_CREATED)
async def create_sketch(body: SketchCreate) -> SketchResponse:
    item = sketch_adapter.create_sketch(body.model_dump())
    return SketchResponse(**item)


@router.get("/{sketch_id}", response_model=SketchResponse)
async def get_sketch(sketch_id: str) -> SketchResponse:
    try:
        data = sketch_adapter.get_sketch(sketch_id)
    except KeyError as exc:
        raise _not_found() from exc
    return SketchResponse(**data)


@router.delete("/{sketch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sketch(sketch_id: str) -> None:
    try:
        sketch_adapter.delete_sketch(sketch_id)
    except KeyError as exc:
        raise _not_found() from exc


@router.post("/{sketch_id}/shapes", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_shape(sketch_id: str, body: ShapeCreate) -> Dict[str, Any]:
    try:
        return sketch_adapter.add_shape(sketch_id, body.to_record())
    except KeyError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete("/{sketch_id}/shapes/{index}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_shape(sketch_id: str, index: int) -> None:
    try:
        sketch_adapter.remove_shape(sketch_id, index)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sketch or shape not found") from exc


@router.post("/{sketch_id}/edit")
async def run_edit(sketch_id: str, body: EditRequest) -> Dict[str, Any]:
    try:
        return sketch_adapter.run_edit(sketch_id, body.operation, body.payload)
    except KeyError as exc:
        raise _not_found() from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{sketch_id}/outline", response_model=List[OutlineItem])
async def outline(sketch_id: str) -> List[OutlineItem]:
    try:
        items = sketch_adapter.outline_sketch(sketch_id)
    except KeyError as exc:
        raise _not_found() from exc
    return [OutlineItem(**item) for item in items]
