"""Request-level operations shared by the API and the CLI."""

from __future__ import annotations

import logging

from print_tiler.io.schemas import LayoutRequestSchema, OptimizeResultSchema, TileResultSchema
from print_tiler.layout import apply_packing_result
from print_tiler.models import PrintObject, SheetDimensions
from print_tiler.packing.optimizer import find_packing_layout
from print_tiler.texture import load_textures
from print_tiler.tiling import tile_layout

logger = logging.getLogger(__name__)


def build_plan(request: LayoutRequestSchema) -> OptimizeResultSchema:
    """
    Optimise the request's objects onto the smallest-waste sheet grid.

    Raises ValueError for an empty request and NoFeasibleLayout when no grid
    up to the maximum width can hold the widest object.
    """
    sheet = request.resolve_sheet()
    objects, notices = request.build_objects()
    result = find_packing_layout(objects, sheet.width_mm, sheet.height_mm)
    return OptimizeResultSchema(
        sheet=sheet,
        result=result,
        objects=apply_packing_result(objects, result),
        notices=notices,
    )


def resolve_layout(
    request: LayoutRequestSchema,
    optimise: bool = False,
) -> tuple[SheetDimensions, list[PrintObject], int, int]:
    """Sheet, objects and grid to tile, optionally optimised first."""
    if optimise:
        plan = build_plan(request)
        return plan.sheet, plan.objects, plan.result.columns, plan.result.rows

    objects, _notices = request.build_objects()
    return request.resolve_sheet(), objects, request.columns, request.rows


def build_tiles(request: LayoutRequestSchema, optimise: bool = False) -> TileResultSchema:
    """Per-sheet draw commands for the request (textures are decoded first)."""
    sheet, objects, columns, rows = resolve_layout(request, optimise=optimise)
    textures = load_textures(objects)
    pages = tile_layout(objects, sheet, columns, rows, textures)
    return TileResultSchema(
        sheet=sheet,
        columns=columns,
        rows=rows,
        page_count=len(pages),
        pages=pages,
    )
