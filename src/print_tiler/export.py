"""PDF rendering of tiled pages with reportlab."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Mapping, Optional, Sequence, Union

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from print_tiler.constants import OUTLINE_RGB, OUTLINE_WIDTH_MM
from print_tiler.models import ImageCropCommand, Page, PrintObject, SheetDimensions
from print_tiler.texture import PixelCrop, Texture, load_textures
from print_tiler.tiling import tile_layout_or_raise

logger = logging.getLogger(__name__)

Output = Union[str, Path, BinaryIO]


def crop_texture(texture: Texture, command: ImageCropCommand) -> Image.Image:
    """Cut the command's source rectangle out of the texture, resampled to whole pixels."""
    crop = PixelCrop(command.src_x, command.src_y, command.src_w, command.src_h)
    # The one-pixel minimum can push the box past the source edge; pull it back inside.
    right = min(float(texture.source_pixel_width), crop.src_x + crop.src_w)
    bottom = min(float(texture.source_pixel_height), crop.src_y + crop.src_h)
    left = max(0.0, min(crop.src_x, right - 1.0))
    top = max(0.0, min(crop.src_y, bottom - 1.0))
    return texture.image.resize(crop.pixel_size, box=(left, top, right, bottom))


def render_pages_to_pdf(
    pages: Sequence[Page],
    sheet: SheetDimensions,
    textures: Mapping[str, Texture],
    output: Output,
) -> int:
    """
    Draw pages into a PDF, one sheet-sized page each. Returns the page count.

    Command coordinates are top-left based mm; PDF space is bottom-left based
    points, so y is flipped per command.
    """
    if isinstance(output, Path):
        output = str(output)

    page_width = float(sheet.width_mm) * mm
    page_height = float(sheet.height_mm) * mm
    pdf = canvas.Canvas(output, pagesize=(page_width, page_height))
    r, g, b = (c / 255.0 for c in OUTLINE_RGB)

    for page in pages:
        pdf.setStrokeColorRGB(r, g, b)
        pdf.setLineWidth(OUTLINE_WIDTH_MM * mm)

        for command in page.commands:
            x = command.x * mm
            y = (float(sheet.height_mm) - command.y - command.h) * mm
            w = command.w * mm
            h = command.h * mm

            if isinstance(command, ImageCropCommand):
                segment = crop_texture(textures[command.object_id], command)
                pdf.drawImage(ImageReader(segment), x, y, width=w, height=h, mask="auto")
                pdf.rect(x, y, w, h, stroke=1, fill=0)
            else:
                fr, fg, fb = command.color_rgb
                pdf.setFillColorRGB(fr / 255.0, fg / 255.0, fb / 255.0)
                pdf.rect(x, y, w, h, stroke=1, fill=1)

        pdf.showPage()

    pdf.save()
    return len(pages)


def export_layout_to_pdf(
    objects: Sequence[PrintObject],
    sheet: SheetDimensions,
    columns: int,
    rows: int,
    output: Output,
    max_workers: Optional[int] = None,
) -> list[Page]:
    """
    Load textures, tile the layout and write the PDF.

    Raises TextureLoadError if any texture fails (nothing is written) and
    EmptyLayoutError if no object lands on the grid.
    """
    if not objects:
        raise ValueError("Add one or more print objects before exporting.")

    textures = load_textures(objects, max_workers=max_workers)
    pages = tile_layout_or_raise(objects, sheet, columns, rows, textures)
    render_pages_to_pdf(pages, sheet, textures, output)

    logger.info(f"exported_pages={len(pages)}, grid={columns}x{rows}, textures={len(textures)}")
    return pages
