from __future__ import annotations

import json

import pytest

from print_tiler.cli import main


def write_layout(path, layout):
    path.write_text(json.dumps(layout), encoding="utf-8")
    return path


def test_optimize_writes_plan(tmp_path, capsys):
    layout = write_layout(tmp_path / "layout.json", {
        "paper": "a4",
        "objects": [
            {"id": "A", "width_mm": 100, "height_mm": 50},
            {"id": "B", "width_mm": 100, "height_mm": 50},
            {"id": "C", "width_mm": 100, "height_mm": 100},
        ],
    })
    output = tmp_path / "plan.json"

    main(["optimize", "--input", str(layout), "--output", str(output)])

    plan = json.loads(output.read_text(encoding="utf-8"))
    assert plan["result"]["columns"] == 1
    assert plan["result"]["rows"] == 1
    assert set(plan["result"]["placements"]) == {"A", "B", "C"}
    assert "Plan written to" in capsys.readouterr().out


def test_export_writes_pdf(tmp_path):
    layout = write_layout(tmp_path / "layout.json", {
        "sheet": {"width_mm": 100, "height_mm": 100},
        "columns": 2,
        "rows": 1,
        "prints": [{"width": 15, "height": 5, "unit": "cm", "quantity": 1}],
    })
    output = tmp_path / "layout.pdf"

    main(["export", "--input", str(layout), "--output", str(output)])

    assert output.read_bytes().startswith(b"%PDF")


def test_export_with_optimise(tmp_path):
    layout = write_layout(tmp_path / "layout.json", {
        "paper": "a4",
        "objects": [{"id": "A", "width_mm": 300, "height_mm": 300, "x_mm": 5000, "y_mm": 5000}],
    })
    output = tmp_path / "layout.pdf"

    main(["export", "--input", str(layout), "--output", str(output), "--optimise"])

    assert output.exists()


def test_infeasible_layout_exits_with_message(tmp_path):
    layout = write_layout(tmp_path / "layout.json", {
        "sheet": {"width_mm": 10, "height_mm": 10},
        "objects": [{"id": "A", "width_mm": 1000, "height_mm": 10}],
    })

    with pytest.raises(SystemExit) as info:
        main(["optimize", "--input", str(layout), "--output", str(tmp_path / "plan.json")])

    assert "sheet grid" in str(info.value.code)


def test_empty_export_exits_with_message(tmp_path):
    layout = write_layout(tmp_path / "layout.json", {
        "objects": [{"id": "A", "width_mm": 10, "height_mm": 10, "x_mm": -50, "y_mm": -50}],
    })

    with pytest.raises(SystemExit) as info:
        main(["export", "--input", str(layout), "--output", str(tmp_path / "out.pdf")])

    assert "Nothing to export" in str(info.value.code)
