"""Tests for API responses and input validation."""

from __future__ import annotations

from fastapi.testclient import TestClient

from print_tiler.api import app

client = TestClient(app)


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_optimize_returns_grid_and_moved_objects() -> None:
    request = {
        "paper": "a4",
        "objects": [{"id": "poster", "width_mm": 300, "height_mm": 300, "x_mm": 55, "y_mm": 70}],
    }

    response = client.post("/optimize", json=request)

    assert response.status_code == 200
    data = response.json()
    assert data["result"]["columns"] == 2
    assert data["result"]["rows"] == 2
    assert data["result"]["placements"]["poster"] == {"x_mm": 0.0, "y_mm": 0.0}
    assert data["objects"][0]["x_mm"] == 0.0
    assert data["sheet"] == {"width_mm": 210.0, "height_mm": 297.0}


def test_optimize_creates_prints_from_user_units() -> None:
    request = {
        "paper": "a4",
        "orientation": "landscape",
        "prints": [{"width": 10, "height": 10, "unit": "cm", "quantity": 4}],
    }

    response = client.post("/optimize", json=request)

    assert response.status_code == 200
    data = response.json()
    assert len(data["objects"]) == 4
    assert all(obj["width_mm"] == 100.0 for obj in data["objects"])
    assert data["sheet"] == {"width_mm": 297.0, "height_mm": 210.0}


def test_optimize_without_objects_is_friendly_422() -> None:
    response = client.post("/optimize", json={"paper": "a4"})

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_INPUT"
    assert "summary" in data
    assert "details" in data


def test_optimize_invalid_dimensions_is_friendly_422() -> None:
    request = {"objects": [{"id": "a", "width_mm": -5, "height_mm": 10}]}

    response = client.post("/optimize", json=request)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_INPUT"
    assert any("width_mm" in detail for detail in data["details"])


def test_optimize_infeasible_layout() -> None:
    request = {
        "sheet": {"width_mm": 100, "height_mm": 100},
        "objects": [{"id": "banner", "width_mm": 2401, "height_mm": 10}],
    }

    response = client.post("/optimize", json=request)

    assert response.status_code == 422
    assert response.json()["error"] == "NO_FEASIBLE_LAYOUT"


def test_tile_returns_only_non_empty_pages() -> None:
    request = {
        "sheet": {"width_mm": 100, "height_mm": 100},
        "columns": 3,
        "rows": 3,
        "objects": [{"id": "a", "width_mm": 150, "height_mm": 50, "x_mm": 0, "y_mm": 0, "color": "#47a3f3"}],
    }

    response = client.post("/tile", json=request)

    assert response.status_code == 200
    data = response.json()
    assert data["page_count"] == 2
    first = data["pages"][0]["commands"][0]
    assert first["kind"] == "fill"
    assert first["color_rgb"] == [71, 163, 243]
    assert data["pages"][1]["commands"][0]["w"] == 50.0


def test_tile_with_optimise_flag_uses_optimised_grid() -> None:
    request = {
        "paper": "a4",
        "columns": 5,
        "rows": 5,
        "objects": [{"id": "a", "width_mm": 100, "height_mm": 100, "x_mm": 900, "y_mm": 900}],
    }

    response = client.post("/tile?optimise=1", json=request)

    assert response.status_code == 200
    data = response.json()
    assert (data["columns"], data["rows"]) == (1, 1)
    assert data["page_count"] == 1


def test_tile_with_textures(png_data_url) -> None:
    request = {
        "sheet": {"width_mm": 100, "height_mm": 100},
        "objects": [{"id": "t", "width_mm": 50, "height_mm": 50, "texture_src": png_data_url}],
    }

    response = client.post("/tile", json=request)

    assert response.status_code == 200
    command = response.json()["pages"][0]["commands"][0]
    assert command["kind"] == "image"
    assert command["src_w"] == 100.0


def test_tile_bad_texture_is_400() -> None:
    request = {
        "objects": [{"id": "t", "width_mm": 50, "height_mm": 50, "texture_src": "data:image/png;base64,AAAA"}],
    }

    response = client.post("/tile", json=request)

    assert response.status_code == 400
    assert response.json()["error"] == "TEXTURE_LOAD_FAILED"


def test_export_returns_pdf() -> None:
    request = {
        "paper": "a5",
        "objects": [{"id": "a", "width_mm": 50, "height_mm": 50}],
    }

    response = client.post("/export", json=request)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_export_empty_layout_is_friendly_422() -> None:
    request = {"objects": [{"id": "a", "width_mm": 50, "height_mm": 50, "x_mm": -500, "y_mm": -500}]}

    response = client.post("/export", json=request)

    assert response.status_code == 422
    assert response.json()["error"] == "EMPTY_LAYOUT"


def test_tile_rejects_server_file_paths(png_path) -> None:
    request = {
        "objects": [{"id": "t", "width_mm": 50, "height_mm": 50, "texture_src": str(png_path)}],
    }

    response = client.post("/tile", json=request)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_INPUT"
    assert "data URL" in data["summary"]


def test_export_rejects_server_file_paths_in_prints() -> None:
    request = {"prints": [{"width": 50, "height": 50, "texture_src": "/etc/passwd"}]}

    response = client.post("/export", json=request)

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_optimize_infinite_size_is_friendly_422() -> None:
    request = {"objects": [{"id": "a", "width_mm": "inf", "height_mm": 10}]}

    response = client.post("/optimize", json=request)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "INVALID_INPUT"
    assert any("width_mm" in detail for detail in data["details"])


def test_optimize_non_finite_sheet_and_prints_are_rejected() -> None:
    sheet = client.post("/optimize", json={
        "sheet": {"width_mm": "Infinity", "height_mm": 100},
        "objects": [{"id": "a", "width_mm": 10, "height_mm": 10}],
    })
    prints = client.post("/optimize", json={"prints": [{"width": "nan", "height": 10}]})

    assert sheet.status_code == 422
    assert prints.status_code == 422
