from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI

from parcelsketch_core import __version__
from parcelsketch_core.log import setup_logging

from .adapters import sketch as sketch_adapter
from .routers import sketches as sketches_router

setup_logging(logging.INFO)

app = FastAPI(title="ParcelSketch API", version=__version__, description="Parcel sketch geometry: shapes, arcs and areas")
app.include_router(sketches_router.router)


@app.get("/")
async def index() -> Dict[str, Any]:
    return {
        "name": "parcelsketch-api",
        "version": app.version,
        "routes": [
            {"path": "/sketches", "methods": ["GET", "POST"]},
            {"path": "/sketches/{id}/shapes", "methods": ["POST"]},
            {"path": "/sketches/{id}/edit", "methods": ["POST"]},
            {"path": "/sketches/{id}/outline", "methods": ["GET"]},
        ],
        "edit_operations": sorted(sketch_adapter.EDIT_OPERATIONS),
        "sketch_count": len(sketch_adapter.list_sketches()),
    }
