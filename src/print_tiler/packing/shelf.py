# src/print_tiler/packing/shelf.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from print_tiler.constants import EPSILON
from print_tiler.errors import NoFit
from print_tiler.models import Placement, Rectangle


@dataclass
class Shelf:
    """Horizontal band holding rectangles side by side."""

    y_mm: float
    height_mm: float
    used_width_mm: float
    rectangle_ids: list[str] = field(default_factory=list)


@dataclass
class ShelfPacking:
    placements: dict[str, Placement] = field(default_factory=dict)
    total_height_mm: float = 0.0
    used_width_mm: float = 0.0


def find_tightest_shelf(shelves: list[Shelf], width_mm: float, max_width_mm: float) -> int:
    """
    Index of the shelf that leaves the least width after adding `width_mm`,
    or -1 when no shelf has room. The earliest shelf wins ties.
    """
    best_index = -1
    tightest_remaining = float("inf")

    for index, shelf in enumerate(shelves):
        projected_width = shelf.used_width_mm + width_mm
        if projected_width <= max_width_mm + EPSILON:
            remaining = max_width_mm - projected_width
            if remaining < tightest_remaining:
                tightest_remaining = remaining
                best_index = index

    return best_index


def pack_within_width(rectangles: Sequence[Rectangle], max_width_mm: float) -> ShelfPacking:
    """
    Best-fit shelf packer bounded by `max_width_mm`.
    - Rectangles are processed in the given order, never rotated
    - Each rectangle goes on the shelf it fills most tightly, else on a new shelf
    - A taller rectangle grows its shelf and pushes every later shelf down
    - Deterministic (no randomness)

    Raises NoFit if any rectangle is wider than the bound.
    """
    max_width_mm = float(max_width_mm)
    shelves: list[Shelf] = []
    placements: dict[str, Placement] = {}
    total_height_mm = 0.0
    max_used_width_mm = 0.0

    for rect in rectangles:
        width = float(rect.width_mm)
        height = float(rect.height_mm)

        if width > max_width_mm + EPSILON:
            raise NoFit(rect.id, width, max_width_mm)

        shelf_index = find_tightest_shelf(shelves, width, max_width_mm)

        if shelf_index == -1:
            shelf = Shelf(
                y_mm=total_height_mm,
                height_mm=height,
                used_width_mm=width,
                rectangle_ids=[rect.id],
            )
            shelves.append(shelf)
            placements[rect.id] = Placement(x_mm=0.0, y_mm=shelf.y_mm)
            total_height_mm += height
            max_used_width_mm = max(max_used_width_mm, width)
            continue

        shelf = shelves[shelf_index]
        placements[rect.id] = Placement(x_mm=shelf.used_width_mm, y_mm=shelf.y_mm)
        shelf.used_width_mm += width
        shelf.rectangle_ids.append(rect.id)
        max_used_width_mm = max(max_used_width_mm, shelf.used_width_mm)

        if height > shelf.height_mm:
            delta = height - shelf.height_mm
            shelf.height_mm = height
            # Later shelves (and what sits on them) move below the grown shelf.
            for later in shelves[shelf_index + 1:]:
                later.y_mm += delta
                for moved_id in later.rectangle_ids:
                    moved = placements[moved_id]
                    placements[moved_id] = Placement(x_mm=moved.x_mm, y_mm=later.y_mm)
            total_height_mm += delta

    height_extent = 0.0
    if shelves:
        height_extent = shelves[-1].y_mm + shelves[-1].height_mm

    return ShelfPacking(
        placements=placements,
        total_height_mm=max(total_height_mm, height_extent),
        used_width_mm=min(max_width_mm, max_used_width_mm),
    )
