"""Texture decoding and source-pixel crop mapping."""

from __future__ import annotations

import base64
import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from print_tiler.config import get_settings
from print_tiler.constants import SUPPORTED_TEXTURE_FORMATS
from print_tiler.errors import TextureLoadError
from print_tiler.models import PrintObject

logger = logging.getLogger(__name__)


@dataclass
class Texture:
    """A decoded texture image and its pixel size."""

    source_pixel_width: int
    source_pixel_height: int
    image: Image.Image


@dataclass(frozen=True)
class PixelCrop:
    src_x: float
    src_y: float
    src_w: float
    src_h: float

    @property
    def pixel_size(self) -> tuple[int, int]:
        """Rounded output size of the crop, at least one pixel each way."""
        return (max(1, round(self.src_w)), max(1, round(self.src_h)))


def sample_texture_crop(
    object_bounds: tuple[float, float, float, float],
    source_pixel_width: int,
    source_pixel_height: int,
    intersection: tuple[float, float, float, float],
) -> PixelCrop:
    """
    Map part of an object (mm) onto its texture's pixel grid.

    object_bounds: (x, y, width, height) of the whole object in layout mm
    intersection:  (left, top, width, height) of the part to sample, in layout mm

    The crop is always at least one pixel and never runs past the source.
    """
    obj_x, obj_y, obj_w, obj_h = object_bounds
    inter_left, inter_top, inter_w, inter_h = intersection

    scale_x = source_pixel_width / obj_w
    scale_y = source_pixel_height / obj_h

    src_x = max(0.0, (inter_left - obj_x) * scale_x)
    src_y = max(0.0, (inter_top - obj_y) * scale_y)
    src_w = max(1.0, min(source_pixel_width - src_x, inter_w * scale_x))
    src_h = max(1.0, min(source_pixel_height - src_y, inter_h * scale_y))

    return PixelCrop(src_x=src_x, src_y=src_y, src_w=src_w, src_h=src_h)


def _read_texture_bytes(src: str) -> bytes:
    if src.startswith("data:"):
        header, sep, payload = src.partition(",")
        if not sep:
            raise ValueError("malformed data URL")
        mime = header[len("data:"):].split(";")[0].strip().lower()
        if mime not in SUPPORTED_TEXTURE_FORMATS:
            raise ValueError(f"unsupported texture type '{mime}'. Please choose a PNG, JPG, or WebP image")
        if ";base64" not in header:
            raise ValueError("data URL must be base64 encoded")
        return base64.b64decode(payload, validate=True)
    return Path(src).read_bytes()


def decode_texture(src: str, object_id: Optional[str] = None) -> Texture:
    """Fully decode a texture from a file path or a base64 data URL."""
    try:
        data = _read_texture_bytes(src)
        image = Image.open(BytesIO(data))
        image.load()
    except (OSError, ValueError) as e:
        raise TextureLoadError(object_id, str(e)) from e

    if image.format not in set(SUPPORTED_TEXTURE_FORMATS.values()):
        raise TextureLoadError(object_id, f"unsupported image format '{image.format}'")

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    width, height = image.size
    return Texture(source_pixel_width=width, source_pixel_height=height, image=image)


def load_textures(
    objects: Sequence[PrintObject],
    max_workers: Optional[int] = None,
) -> dict[str, Texture]:
    """
    Decode every object texture concurrently.

    All-or-nothing: the first failure cancels outstanding decodes and raises
    TextureLoadError; otherwise every texture is returned keyed by object id.
    """
    textured = [obj for obj in objects if obj.texture_src]
    if not textured:
        return {}

    workers = max_workers or get_settings().texture_workers

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(decode_texture, obj.texture_src, obj.id): obj for obj in textured}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)

        for future in done:
            error = future.exception()
            if error is None:
                continue
            for other in pending:
                other.cancel()
            obj = futures[future]
            logger.error(f"Texture loading error for '{obj.id}': {error}", exc_info=error)
            if isinstance(error, TextureLoadError):
                raise error
            raise TextureLoadError(obj.id, str(error)) from error

    return {obj.id: future.result() for future, obj in futures.items()}
