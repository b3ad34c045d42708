"""Split a sheet layout into per-sheet draw commands."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from print_tiler.constants import EPSILON
from print_tiler.errors import EmptyLayoutError
from print_tiler.geometry import cell_bounds, hex_to_rgb, intersection, object_bounds, rects_overlap
from print_tiler.models import FillCommand, ImageCropCommand, Page, PrintObject, SheetDimensions
from print_tiler.texture import Texture, sample_texture_crop

logger = logging.getLogger(__name__)


def tile_cell(
    objects: Sequence[PrintObject],
    sheet: SheetDimensions,
    row_index: int,
    column_index: int,
    textures: Mapping[str, Texture],
) -> list:
    """Draw commands for every object that lands on one sheet cell, in object order."""
    cell = cell_bounds(row_index, column_index, sheet)
    origin_x, origin_y = cell[0], cell[1]
    commands = []

    for obj in objects:
        bounds = object_bounds(obj)
        if not rects_overlap(bounds, cell):
            continue
        left, top, right, bottom = intersection(bounds, cell)
        inter_width = right - left
        inter_height = bottom - top
        if inter_width <= EPSILON or inter_height <= EPSILON:
            continue

        # Sheet-relative destination
        x = left - origin_x
        y = top - origin_y

        texture = textures.get(obj.id)
        if texture is not None:
            crop = sample_texture_crop(
                (float(obj.x_mm), float(obj.y_mm), float(obj.width_mm), float(obj.height_mm)),
                texture.source_pixel_width,
                texture.source_pixel_height,
                (left, top, inter_width, inter_height),
            )
            commands.append(ImageCropCommand(
                object_id=obj.id,
                x=x, y=y, w=inter_width, h=inter_height,
                src_x=crop.src_x, src_y=crop.src_y, src_w=crop.src_w, src_h=crop.src_h,
            ))
        else:
            commands.append(FillCommand(
                object_id=obj.id,
                x=x, y=y, w=inter_width, h=inter_height,
                color_rgb=hex_to_rgb(obj.color),
            ))

    return commands


def tile_layout(
    objects: Sequence[PrintObject],
    sheet: SheetDimensions,
    columns: int,
    rows: int,
    textures: Optional[Mapping[str, Texture]] = None,
) -> list[Page]:
    """
    Slice placed objects into pages, one per non-empty sheet cell.
    - Cells are visited row by row; objects keep their input order
    - Objects with a loaded texture become image crops, the rest flat fills
    - Cells without content produce no page
    """
    textures = textures or {}
    pages: list[Page] = []

    for row_index in range(rows):
        for column_index in range(columns):
            commands = tile_cell(objects, sheet, row_index, column_index, textures)
            if commands:
                pages.append(Page(row_index=row_index, column_index=column_index, commands=commands))

    logger.debug(f"{len(pages)} of {columns * rows} sheets have content")
    return pages


def tile_layout_or_raise(
    objects: Sequence[PrintObject],
    sheet: SheetDimensions,
    columns: int,
    rows: int,
    textures: Optional[Mapping[str, Texture]] = None,
) -> list[Page]:
    pages = tile_layout(objects, sheet, columns, rows, textures)
    if not pages:
        raise EmptyLayoutError()
    return pages
