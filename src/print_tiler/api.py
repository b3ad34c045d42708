"""FastAPI endpoints for print-tiler."""

from __future__ import annotations

import json
import logging
from io import BytesIO
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Response
from pydantic import ValidationError

from print_tiler.config import get_settings
from print_tiler.errors import EmptyLayoutError, NoFeasibleLayout, TextureLoadError
from print_tiler.export import export_layout_to_pdf
from print_tiler.io.schemas import LayoutRequestSchema
from print_tiler.plan import build_plan, build_tiles, resolve_layout

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Print Tiler API",
    description="Sheet-grid packing and per-sheet tiling for large prints",
)


def friendly_error(status_code: int, error: str, summary: str, details: list[str]) -> Response:
    """JSON error body with a stable {error, summary, details} shape."""
    return Response(
        content=json.dumps({"error": error, "summary": summary, "details": details}),
        status_code=status_code,
        media_type="application/json",
    )


def require_uploaded_textures(request: LayoutRequestSchema) -> None:
    """Only data URLs are accepted over HTTP; file paths are for the CLI."""
    if any(not src.startswith("data:") for src in request.texture_sources()):
        raise ValueError("Textures must be uploaded as PNG, JPG, or WebP data URLs.")


def validation_details(exc: ValidationError) -> list[str]:
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        details.append(f"{location}: {err.get('msg', 'invalid')}" if location else err.get("msg", "invalid"))
    return details


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {"ok": True}


@app.post("/optimize")
async def optimize(body: dict[str, Any]) -> Any:
    """
    Optimise a layout and return the chosen grid with objects moved into place.

    Input (request body):
        {
            "paper": "a4",
            "orientation": "portrait",
            "prints": [{ "width": 30, "height": 40, "unit": "cm", "quantity": 2 }],
            "objects": [{ "id": "poster", "width_mm": 300, "height_mm": 300 }]
        }
    """
    try:
        request = LayoutRequestSchema.model_validate(body)
        plan = build_plan(request)
    except ValidationError as e:
        return friendly_error(422, "INVALID_INPUT", "Please check the layout details.", validation_details(e))
    except NoFeasibleLayout as e:
        return friendly_error(422, "NO_FEASIBLE_LAYOUT", str(e), [])
    except ValueError as e:
        return friendly_error(422, "INVALID_INPUT", str(e), [])
    except Exception as e:
        logger.error(f"ERROR in /optimize endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        f"columns={plan.result.columns}, rows={plan.result.rows}, "
        f"waste_area={plan.result.waste_area:.1f}, objects={len(plan.objects)}"
    )
    return plan.model_dump(mode="json")


@app.post("/tile")
async def tile(
    body: dict[str, Any],
    optimise: int = Query(0, description="Optimise the layout first (1) or use the given grid (0)"),
) -> Any:
    """Return per-sheet draw commands for the layout; empty sheets are omitted."""
    try:
        request = LayoutRequestSchema.model_validate(body)
        require_uploaded_textures(request)
        tiles = build_tiles(request, optimise=optimise == 1)
    except ValidationError as e:
        return friendly_error(422, "INVALID_INPUT", "Please check the layout details.", validation_details(e))
    except NoFeasibleLayout as e:
        return friendly_error(422, "NO_FEASIBLE_LAYOUT", str(e), [])
    except TextureLoadError as e:
        return friendly_error(
            400, "TEXTURE_LOAD_FAILED",
            "We could not load one of the textures. Please re-upload it and try again.",
            [str(e)],
        )
    except ValueError as e:
        return friendly_error(422, "INVALID_INPUT", str(e), [])
    except Exception as e:
        logger.error(f"ERROR in /tile endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"pages={tiles.page_count}, grid={tiles.columns}x{tiles.rows}")
    return tiles.model_dump(mode="json")


@app.post("/export")
async def export(
    body: dict[str, Any],
    optimise: int = Query(0, description="Optimise the layout first (1) or use the given grid (0)"),
) -> Any:
    """Render the layout to a PDF with one page per non-empty sheet."""
    try:
        request = LayoutRequestSchema.model_validate(body)
        require_uploaded_textures(request)
        sheet, objects, columns, rows = resolve_layout(request, optimise=optimise == 1)
        buffer = BytesIO()
        export_layout_to_pdf(objects, sheet, columns, rows, buffer)
    except ValidationError as e:
        return friendly_error(422, "INVALID_INPUT", "Please check the layout details.", validation_details(e))
    except NoFeasibleLayout as e:
        return friendly_error(422, "NO_FEASIBLE_LAYOUT", str(e), [])
    except EmptyLayoutError as e:
        return friendly_error(422, "EMPTY_LAYOUT", str(e), [])
    except TextureLoadError as e:
        return friendly_error(
            400, "TEXTURE_LOAD_FAILED",
            "We could not load one of the textures. Please re-upload it and try again.",
            [str(e)],
        )
    except ValueError as e:
        return friendly_error(422, "INVALID_INPUT", str(e), [])
    except Exception as e:
        logger.error(f"ERROR in /export endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))

    filename = get_settings().pdf_name
    return Response(
        content=buffer.getvalue(),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
