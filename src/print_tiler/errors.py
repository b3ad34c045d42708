"""Error types raised by the packing, tiling and texture layers."""

from __future__ import annotations


class PrintTilerError(Exception):
    """Base class for print-tiler errors."""


class NoFit(PrintTilerError):
    """A rectangle is wider than the shelf width bound, even on its own."""

    def __init__(self, rectangle_id: str, width_mm: float, max_width_mm: float):
        self.rectangle_id = rectangle_id
        self.width_mm = width_mm
        self.max_width_mm = max_width_mm
        super().__init__(
            f"Rectangle '{rectangle_id}' ({width_mm} mm) does not fit within {max_width_mm} mm"
        )


class NoFeasibleLayout(PrintTilerError):
    """No sheet-grid column count yields a feasible packing."""

    def __init__(self, message: str = "Unable to generate an optimised layout. "
                                      "Try increasing the sheet grid or adjusting sizes."):
        super().__init__(message)


class TextureLoadError(PrintTilerError):
    """A texture could not be decoded; the whole export is abandoned."""

    def __init__(self, object_id: str | None, reason: str):
        self.object_id = object_id
        self.reason = reason
        target = f" for '{object_id}'" if object_id else ""
        super().__init__(f"Could not load texture{target}: {reason}")


class EmptyLayoutError(PrintTilerError):
    """Tiling produced no pages: no object intersects any sheet cell."""

    def __init__(self, message: str = "Nothing to export. "
                                      "Make sure objects are placed within the sheet layout."):
        super().__init__(message)
