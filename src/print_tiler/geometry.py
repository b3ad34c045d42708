"""Geometry utilities for sheet layouts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import PrintObject, SheetDimensions

Bounds = tuple[float, float, float, float]


def rects_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned rectangle overlap test.

    a, b are bounds: (x1, y1, x2, y2)

    Overlap exists only if they overlap on BOTH axes with positive area.
    Touching edges (ax2 == bx1) is NOT considered overlap.
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b

    return (ax1 < bx2 and ax2 > bx1) and (ay1 < by2 and ay2 > by1)


def intersection(a: Bounds, b: Bounds) -> Bounds:
    """
    Intersection of two bounds as (left, top, right, bottom).

    The result may be degenerate (right <= left); callers decide what counts
    as empty.
    """
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return (max(ax1, bx1), max(ay1, by1), min(ax2, bx2), min(ay2, by2))


def object_bounds(obj: "PrintObject") -> Bounds:
    x, y = float(obj.x_mm), float(obj.y_mm)
    return (x, y, x + float(obj.width_mm), y + float(obj.height_mm))


def cell_bounds(row_index: int, column_index: int, sheet: "SheetDimensions") -> Bounds:
    origin_x = column_index * float(sheet.width_mm)
    origin_y = row_index * float(sheet.height_mm)
    return (origin_x, origin_y, origin_x + float(sheet.width_mm), origin_y + float(sheet.height_mm))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse '#rrggbb' or '#rgb' into an (r, g, b) tuple."""
    normalized = value.strip().lstrip("#")
    if len(normalized) == 3:
        normalized = "".join(ch * 2 for ch in normalized)
    if len(normalized) != 6:
        raise ValueError(f"Invalid hex colour '{value}'")
    number = int(normalized, 16)
    return ((number >> 16) & 255, (number >> 8) & 255, number & 255)
