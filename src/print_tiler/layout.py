# src/print_tiler/layout.py
from __future__ import annotations

import math
import uuid
from typing import Sequence

from print_tiler.constants import (
    COLOR_PALETTE,
    MAX_QUANTITY_PER_ADD,
    PLACEMENT_STAGGER_MM,
    UNIT_MULTIPLIERS,
)
from print_tiler.models import PackingResult, PrintObject, SheetDimensions


def to_mm(value: float, unit: str) -> float:
    key = unit.strip().lower()
    if key not in UNIT_MULTIPLIERS:
        raise ValueError(f"Unknown unit '{unit}'. Valid: {sorted(UNIT_MULTIPLIERS.keys())}")
    return float(value) * UNIT_MULTIPLIERS[key]


def layout_size(sheet: SheetDimensions, columns: int, rows: int) -> tuple[float, float]:
    return float(sheet.width_mm) * columns, float(sheet.height_mm) * rows


def clamp_origin(x_mm: float, y_mm: float, width_mm: float, height_mm: float,
                 layout_width_mm: float, layout_height_mm: float) -> tuple[float, float]:
    """
    Keep an origin inside the layout. An object larger than the layout may start
    at a negative offset so that it still covers the whole layout.
    """
    max_x = max(layout_width_mm - width_mm, 0.0)
    max_y = max(layout_height_mm - height_mm, 0.0)
    min_x = min(0.0, layout_width_mm - width_mm)
    min_y = min(0.0, layout_height_mm - height_mm)
    return min(max(x_mm, min_x), max_x), min(max(y_mm, min_y), max_y)


def clamp_position(obj: PrintObject, layout_width_mm: float, layout_height_mm: float) -> PrintObject:
    x, y = clamp_origin(
        float(obj.x_mm), float(obj.y_mm),
        float(obj.width_mm), float(obj.height_mm),
        layout_width_mm, layout_height_mm,
    )
    if x == obj.x_mm and y == obj.y_mm:
        return obj
    return obj.model_copy(update={"x_mm": x, "y_mm": y})


def clamp_objects(
    objects: Sequence[PrintObject],
    sheet: SheetDimensions,
    columns: int,
    rows: int,
) -> list[PrintObject]:
    """Pull every object back inside the sheet grid (e.g. after the grid shrinks)."""
    layout_width, layout_height = layout_size(sheet, columns, rows)
    return [clamp_position(obj, layout_width, layout_height) for obj in objects]


def create_print_objects(
    width: float,
    height: float,
    unit: str,
    quantity: int,
    existing_count: int,
    sheet: SheetDimensions,
    columns: int = 1,
    rows: int = 1,
) -> tuple[list[PrintObject], list[str]]:
    """
    Build `quantity` identical print objects with staggered default positions.

    Returns the new objects and user-facing notices (quantity capped, object
    spans several sheets, object larger than the grid).
    """
    if width is None or not math.isfinite(width) or width <= 0:
        raise ValueError("Enter a valid width greater than zero.")
    if height is None or not math.isfinite(height) or height <= 0:
        raise ValueError("Enter a valid height greater than zero.")
    if quantity is None or quantity <= 0:
        raise ValueError("Enter a quantity of at least 1.")

    width_mm = to_mm(width, unit)
    height_mm = to_mm(height, unit)
    layout_width, layout_height = layout_size(sheet, columns, rows)

    notices: list[str] = []
    if quantity > MAX_QUANTITY_PER_ADD:
        notices.append(f"Quantity capped at {MAX_QUANTITY_PER_ADD} per add.")
        quantity = MAX_QUANTITY_PER_ADD

    if width_mm > sheet.width_mm or height_mm > sheet.height_mm:
        notices.append("This object is larger than a single sheet and will span multiple sheets.")

    if width_mm > layout_width or height_mm > layout_height:
        notices.append("Increase the sheet grid to keep the full object within the workspace.")

    # Stagger default placement so new items are visible.
    stagger_axis = max(1.0, min(layout_width, layout_height))

    created: list[PrintObject] = []
    for index in range(quantity):
        global_index = existing_count + index
        offset = (global_index * PLACEMENT_STAGGER_MM) % stagger_axis
        x, y = clamp_origin(offset, offset, width_mm, height_mm, layout_width, layout_height)
        created.append(PrintObject(
            id=uuid.uuid4().hex,
            label=f"Print {global_index + 1}",
            width_mm=width_mm,
            height_mm=height_mm,
            x_mm=x,
            y_mm=y,
            color=COLOR_PALETTE[global_index % len(COLOR_PALETTE)],
        ))

    return created, notices


def apply_packing_result(objects: Sequence[PrintObject], result: PackingResult) -> list[PrintObject]:
    """Move objects to their optimised placements; unplaced objects stay put."""
    moved: list[PrintObject] = []
    for obj in objects:
        placement = result.placements.get(obj.id)
        if placement is None:
            moved.append(obj)
            continue
        moved.append(obj.model_copy(update={"x_mm": placement.x_mm, "y_mm": placement.y_mm}))
    return moved
