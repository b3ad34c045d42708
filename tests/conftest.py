from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image


def png_bytes(width: int, height: int, color=(200, 30, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_path(tmp_path):
    """A 400x200 PNG texture on disk."""
    path = tmp_path / "texture.png"
    path.write_bytes(png_bytes(400, 200))
    return path


@pytest.fixture
def png_data_url():
    """A 100x100 PNG texture as a base64 data URL."""
    encoded = base64.b64encode(png_bytes(100, 100, color=(10, 120, 240))).decode("ascii")
    return f"data:image/png;base64,{encoded}"
