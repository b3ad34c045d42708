# src/print_tiler/constants.py
from __future__ import annotations

from print_tiler.models import SheetDimensions

# Portrait dimensions in millimetres.
PAPER_SIZES_MM: dict[str, dict[str, float]] = {
    "A5":      {"width_mm": 148.0, "height_mm": 210.0},
    "A4":      {"width_mm": 210.0, "height_mm": 297.0},
    "A3":      {"width_mm": 297.0, "height_mm": 420.0},
    "A2":      {"width_mm": 420.0, "height_mm": 594.0},
    "A1":      {"width_mm": 594.0, "height_mm": 841.0},
    "LETTER":  {"width_mm": 215.9, "height_mm": 279.4},  # 8.5 x 11 in
    "TABLOID": {"width_mm": 279.4, "height_mm": 431.8},  # 11 x 17 in
}

UNIT_MULTIPLIERS: dict[str, float] = {
    "mm": 1.0,
    "cm": 10.0,
    "in": 25.4,
}

COLOR_PALETTE = ["#5c6ac4", "#47a3f3", "#ec8c69", "#3f9c84", "#a364d9", "#fcda59"]

# Widest sheet grid the optimiser will consider.
MAX_SHEET_GRID = 24

# Fit tolerance in mm.
EPSILON = 0.0001

# Waste difference (mm^2) below which two candidates count as equal.
WASTE_TIE_TOLERANCE = 0.5

SUPPORTED_TEXTURE_FORMATS: dict[str, str] = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
}

MAX_QUANTITY_PER_ADD = 25
PLACEMENT_STAGGER_MM = 18.0

OUTLINE_RGB = (180, 187, 201)
OUTLINE_WIDTH_MM = 0.25


def get_sheet_dimensions(preset: str, orientation: str = "portrait") -> SheetDimensions:
    key = preset.strip().upper()
    if key not in PAPER_SIZES_MM:
        raise ValueError(f"Unknown paper preset '{preset}'. Valid: {sorted(PAPER_SIZES_MM.keys())}")
    dims = PAPER_SIZES_MM[key]
    orientation = orientation.strip().lower()
    if orientation == "portrait":
        return SheetDimensions(width_mm=dims["width_mm"], height_mm=dims["height_mm"])
    if orientation == "landscape":
        return SheetDimensions(width_mm=dims["height_mm"], height_mm=dims["width_mm"])
    raise ValueError(f"Unknown orientation '{orientation}'. Valid: ['landscape', 'portrait']")
