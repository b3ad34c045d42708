from __future__ import annotations

from typing import Iterable

from print_tiler.models import Rectangle


def rectangle_area(rect: Rectangle) -> float:
    return float(rect.width_mm) * float(rect.height_mm)


def total_area(rectangles: Iterable[Rectangle]) -> float:
    total = 0.0
    for rect in rectangles:
        total += rectangle_area(rect)
    return total


def compute_waste_area(
    columns: int,
    rows: int,
    sheet_width_mm: float,
    sheet_height_mm: float,
    used_area: float,
) -> float:
    """Sheet-grid area not covered by rectangles."""
    return columns * rows * sheet_width_mm * sheet_height_mm - used_area
