from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from print_tiler.config import get_settings
from print_tiler.errors import EmptyLayoutError, NoFeasibleLayout, TextureLoadError
from print_tiler.export import export_layout_to_pdf
from print_tiler.io.schemas import LayoutRequestSchema
from print_tiler.logger import setup_logging
from print_tiler.plan import build_plan, resolve_layout


def load_input(path: Path) -> LayoutRequestSchema:
    """
    Read a layout JSON file. Accepted keys:
      - "paper" + "orientation", or an explicit "sheet" {width_mm, height_mm}
      - "columns" / "rows" for the sheet grid
      - "objects": placed objects in mm
      - "prints": {width, height, unit, quantity} entries to create
    """
    return LayoutRequestSchema.model_validate_json(path.read_text(encoding="utf-8"))


def write_plan(plan: dict, path: Path) -> None:
    """Write the plan as pretty, key-sorted JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(plan, f, indent=2, sort_keys=True)


def run_optimize(args: argparse.Namespace) -> None:
    request = load_input(Path(args.input))
    plan = build_plan(request)
    write_plan(plan.model_dump(mode="json"), Path(args.output))

    summary = {
        "columns": plan.result.columns,
        "rows": plan.result.rows,
        "waste_area_mm2": round(plan.result.waste_area, 2),
        "objects": len(plan.objects),
    }
    for notice in plan.notices:
        print(f"⚠️  {notice}")
    print(json.dumps(summary, indent=2, sort_keys=True))
    print(f"✅ Plan written to {args.output}")


def run_export(args: argparse.Namespace) -> None:
    request = load_input(Path(args.input))
    sheet, objects, columns, rows = resolve_layout(request, optimise=args.optimise)
    output = Path(args.output or get_settings().pdf_name)
    output.parent.mkdir(parents=True, exist_ok=True)

    pages = export_layout_to_pdf(objects, sheet, columns, rows, output)
    print(f"✅ {len(pages)} page(s) written to {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="print-tiler", description="Split large prints into sheet-sized pages")
    parser.add_argument("--log-level", default=None, help="Logging level (default: PRINT_TILER_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    optimize = sub.add_parser("optimize", help="Find the sheet grid with the least waste")
    optimize.add_argument("--input", required=True, help="Input layout JSON file")
    optimize.add_argument("--output", required=True, help="Output plan JSON file")
    optimize.set_defaults(func=run_optimize)

    export = sub.add_parser("export", help="Write one PDF page per non-empty sheet")
    export.add_argument("--input", required=True, help="Input layout JSON file")
    export.add_argument("--output", default=None, help="Output PDF file (default: PRINT_TILER_PDF_NAME)")
    export.add_argument(
        "--optimise",
        action="store_true",
        help="Optimise the layout before exporting instead of using the given grid",
    )
    export.set_defaults(func=run_export)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    try:
        args.func(args)
    except (NoFeasibleLayout, EmptyLayoutError, TextureLoadError) as e:
        raise SystemExit(f"❌ {e}")
    except ValidationError as e:
        raise SystemExit(f"❌ Invalid layout file:\n{e}")
    except (ValueError, OSError) as e:
        raise SystemExit(f"❌ {e}")


if __name__ == "__main__":
    main()
