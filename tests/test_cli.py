"""Tests for parcelsketch_core/cli.py."""
import json

import pytest

from parcelsketch_core.cli import main

SKETCH = {
    "name": "Card 7",
    "shapes": [
        {"type": "rectangle", "coordinates": {"x": 0, "y": 0, "width": 100, "height": 50},
         "descriptions": [{"label": "FFL", "effective_area": 50}]},
        {"type": "polygon",
         "coordinates": {"points": [{"x": 0, "y": 0, "bulge": 1.0}, {"x": 100, "y": 0}, {"x": 100, "y": 100}, {"x": 0, "y": 100}]}},
    ],
}


@pytest.fixture
def sketch_file(tmp_path):
    path = tmp_path / "card.json"
    path.write_text(json.dumps(SKETCH), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PARCELSKETCH_GRID_SIZE", "PARCELSKETCH_SNAP_ENABLED", "PARCELSKETCH_GRID_ORIGIN"):
        monkeypatch.delenv(name, raising=False)


def test_area(sketch_file, capsys):
    assert main(["area", str(sketch_file)]) == 0
    out = capsys.readouterr().out
    assert "Card 7: 2 shapes" in out
    assert "50 sf [FFL]" in out
    assert "Total: 189 sf" in out
    assert "FFL: 50 sf raw, 50 sf effective" in out


def test_area_json(sketch_file, capsys):
    main(["area", str(sketch_file), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["total_area"] == 189
    assert data["shapes"][1]["coordinates"]["points"][0]["bulge"] == 1.0
    assert "bulge" not in data["shapes"][1]["coordinates"]["points"][1]


def test_grid_size_override(sketch_file, capsys):
    main(["--grid-size", "20", "area", str(sketch_file), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["shapes"][0]["area"] == 12.5


def test_bare_shape_list(tmp_path, capsys):
    path = tmp_path / "shapes.json"
    path.write_text(json.dumps(SKETCH["shapes"][:1]), encoding="utf-8")
    main(["area", str(path)])
    assert "shapes: 1 shapes" in capsys.readouterr().out


def test_bounds(sketch_file, capsys):
    main(["bounds", str(sketch_file)])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "0 rectangle min=(0, 0) max=(100, 50)"
    assert lines[1] == "1 polygon min=(0, 0) max=(100, 100)"


def test_outline_with_edges(sketch_file, capsys):
    main(["outline", str(sketch_file), "--edges"])
    out = capsys.readouterr().out
    assert "1 polygon: M 0 0 A 50 50 0 0 1 100 0 L 100 100 L 0 100 L 0 0 Z" in out
    assert "edges: 15.7' 10' 10' 10'" in out


def test_missing_file_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["area", str(tmp_path / "missing.json")])
    assert exc.value.code == 2


def test_invalid_sketch_is_usage_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"shapes": [{"type": "blob", "coordinates": {}}]}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["area", str(path)])
