"""Tests for the parcelsketch_api FastAPI routes."""
import math

import pytest
from fastapi.testclient import TestClient

from parcelsketch_api.adapters import sketch as sketch_adapter
from parcelsketch_api.main import app

SQUARE = {
    "type": "polygon",
    "coordinates": {"points": [{"x": 0, "y": 0}, {"x": 100, "y": 0}, {"x": 100, "y": 100}, {"x": 0, "y": 100}]},
}


@pytest.fixture
def client():
    sketch_adapter.get_store().clear()
    with TestClient(app) as c:
        yield c
    sketch_adapter.get_store().clear()


@pytest.fixture
def sketch_id(client):
    resp = client.post("/sketches/", json={"name": "Card 1"})
    assert resp.status_code == 201
    return resp.json()["id"]


def edit(client, sketch_id, operation, **payload):
    return client.post(f"/sketches/{sketch_id}/edit", json={"operation": operation, "payload": payload})


def test_index(client):
    data = client.get("/").json()
    assert data["name"] == "parcelsketch-api"
    assert "set_bulge" in data["edit_operations"]


class TestSketchRoutes:
    def test_create_list_get_delete(self, client, sketch_id):
        listed = client.get("/sketches/").json()
        assert [s["id"] for s in listed] == [sketch_id]
        got = client.get(f"/sketches/{sketch_id}").json()
        assert got["name"] == "Card 1"
        assert got["grid_size"] == 10.0
        assert got["shapes"] == []
        assert client.delete(f"/sketches/{sketch_id}").status_code == 204
        assert client.get(f"/sketches/{sketch_id}").status_code == 404
        assert client.delete(f"/sketches/{sketch_id}").status_code == 404

    def test_invalid_create(self, client):
        assert client.post("/sketches/", json={"grid_size": 0}).status_code == 422


class TestShapeRoutes:
    def test_add_shape_computes_area(self, client, sketch_id):
        resp = client.post(
            f"/sketches/{sketch_id}/shapes",
            json={"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 100, "height": 50},
                  "descriptions": [{"label": "ffl", "effective_area": 45}]},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["index"] == 0
        assert body["shape"]["area"] == 50.0
        sketch = client.get(f"/sketches/{sketch_id}").json()
        assert sketch["total_area"] == 50.0
        assert sketch["total_effective_area"] == 45.0
        assert sketch["description_codes"] == ["FFL"]

    @pytest.mark.parametrize(
        "body",
        [
            {"type": "circle", "coordinates": {"cx": 0}},
            {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 0, "height": 50}},
            {"type": "polygon", "coordinates": {"points": [{"x": 0, "y": 0}, {"x": 100, "y": 0}]}},
        ],
    )
    def test_bad_coordinates(self, client, sketch_id, body):
        resp = client.post(f"/sketches/{sketch_id}/shapes", json=body)
        assert resp.status_code == 400
        assert client.get(f"/sketches/{sketch_id}").json()["shapes"] == []

    def test_unknown_type(self, client, sketch_id):
        resp = client.post(f"/sketches/{sketch_id}/shapes", json={"type": "blob", "coordinates": {}})
        assert resp.status_code == 422

    def test_missing_sketch(self, client):
        assert client.post("/sketches/nope/shapes", json=SQUARE).status_code == 404

    def test_remove_shape(self, client, sketch_id):
        client.post(f"/sketches/{sketch_id}/shapes", json=SQUARE)
        assert client.delete(f"/sketches/{sketch_id}/shapes/0").status_code == 204
        assert client.delete(f"/sketches/{sketch_id}/shapes/0").status_code == 404


class TestEditRoutes:
    @pytest.fixture
    def with_square(self, client, sketch_id):
        client.post(f"/sketches/{sketch_id}/shapes", json=SQUARE)
        return sketch_id

    def test_set_bulge(self, client, with_square):
        resp = edit(client, with_square, "set_bulge", shape_index=0, vertex_index=0, bulge=1.0)
        assert resp.status_code == 200
        shape = resp.json()["result"]["shape"]
        assert shape["coordinates"]["points"][0]["bulge"] == 1.0
        assert abs(shape["area"] - (100 + 12.5 * math.pi)) < 1e-9

    def test_clear_bulge(self, client, with_square):
        edit(client, with_square, "set_bulge", shape_index=0, vertex_index=0, bulge=1.0)
        shape = edit(client, with_square, "set_bulge", shape_index=0, vertex_index=0, bulge=None).json()["result"]["shape"]
        assert "bulge" not in shape["coordinates"]["points"][0]

    def test_apply_sagitta_in_feet(self, client, with_square):
        resp = edit(client, with_square, "apply_sagitta", shape_index=0, vertex_index=0, sagitta_ft=-5)
        bulge = resp.json()["result"]["shape"]["coordinates"]["points"][0]["bulge"]
        assert abs(bulge + 1.0) < 1e-12

    def test_insert_vertex(self, client, with_square):
        resp = edit(client, with_square, "insert_vertex", shape_index=0, after_index=0, x=47, y=2)
        result = resp.json()["result"]
        assert result["index"] == 1
        assert result["shape"]["coordinates"]["points"][1] == {"x": 50.0, "y": 0.0}

    def test_insert_vertex_out_of_range(self, client, with_square):
        resp = edit(client, with_square, "insert_vertex", shape_index=0, after_index=9, x=0, y=0)
        assert resp.status_code == 400

    def test_rectangle_edits(self, client, sketch_id):
        client.post(
            f"/sketches/{sketch_id}/shapes",
            json={"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 100, "height": 50}},
        )
        assert edit(client, sketch_id, "insert_vertex", shape_index=0, after_index=0, x=50, y=0).status_code == 400
        resp = edit(client, sketch_id, "drag_vertex", shape_index=0, handle="bottom-right", x=200, y=50)
        assert resp.json()["result"]["shape"]["area"] == 100.0
        resp = edit(client, sketch_id, "convert_rectangle", shape_index=0)
        assert resp.json()["result"]["shape"]["type"] == "polygon"
        resp = edit(client, sketch_id, "move_shape", shape_index=0, dx=10, dy=0)
        assert resp.json()["result"]["shape"]["coordinates"]["points"][0] == {"x": 10.0, "y": 0.0}

    def test_find_edge(self, client, with_square):
        hit = edit(client, with_square, "find_edge", x=50, y=3).json()["result"]["hit"]
        assert hit["edge_index"] == 0
        assert hit["insert_point"] == [50.0, 0.0]
        assert edit(client, with_square, "find_edge", x=500, y=500).json()["result"]["hit"] is None

    def test_degenerate_arc_is_bad_request(self, client, sketch_id):
        client.post(
            f"/sketches/{sketch_id}/shapes",
            json={"type": "polygon", "coordinates": {"points": [{"x": 0, "y": 0}, {"x": 0.5, "y": 0}, {"x": 50, "y": 50}]}},
        )
        resp = edit(client, sketch_id, "set_bulge", shape_index=0, vertex_index=0, bulge=0.5)
        assert resp.status_code == 400
        assert "too close" in resp.json()["detail"]

    @pytest.mark.parametrize(
        "operation,payload",
        [
            ("explode", {}),
            ("set_bulge", {"shape_index": 5, "vertex_index": 0, "bulge": 0.2}),
            ("set_bulge", {"vertex_index": 0}),
            ("drag_vertex", {"shape_index": 0, "handle": "middle", "x": 0, "y": 0}),
        ],
    )
    def test_bad_edits(self, client, with_square, operation, payload):
        resp = client.post(f"/sketches/{with_square}/edit", json={"operation": operation, "payload": payload})
        assert resp.status_code == 400

    def test_missing_sketch(self, client):
        assert edit(client, "nope", "find_edge", x=0, y=0).status_code == 404


def test_outline(client, sketch_id):
    client.post(f"/sketches/{sketch_id}/shapes", json=SQUARE)
    client.post(f"/sketches/{sketch_id}/shapes", json={"type": "circle", "coordinates": {"cx": 50, "cy": 50, "radius": 10}})
    items = client.get(f"/sketches/{sketch_id}/outline").json()
    assert items[0]["path"] == "M 0 0 L 100 0 L 100 100 L 0 100 L 0 0 Z"
    assert items[0]["bounds"] == {"min_x": 0.0, "min_y": 0.0, "max_x": 100.0, "max_y": 100.0}
    assert items[0]["edge_lengths_ft"] == [10.0, 10.0, 10.0, 10.0]
    assert items[1]["type"] == "circle"
    assert client.get("/sketches/nope/outline").status_code == 404
