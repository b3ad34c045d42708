# src/print_tiler/packing/optimizer.py

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from print_tiler.constants import MAX_SHEET_GRID, WASTE_TIE_TOLERANCE
from print_tiler.errors import NoFeasibleLayout, NoFit
from print_tiler.metrics import compute_waste_area, total_area
from print_tiler.models import PackingResult, Rectangle
from print_tiler.packing.shelf import pack_within_width

logger = logging.getLogger(__name__)


def packing_order(rectangles: Sequence[Rectangle]) -> list[Rectangle]:
    """Largest side first, then taller, then wider."""
    return sorted(
        rectangles,
        key=lambda r: (
            -max(float(r.width_mm), float(r.height_mm)),
            -float(r.height_mm),
            -float(r.width_mm),
        ),
    )


def column_range(rectangles: Sequence[Rectangle], sheet_width_mm: float) -> range:
    """
    Column counts to try. Empty when the widest rectangle needs more than
    MAX_SHEET_GRID sheets side by side.
    """
    max_width = max((float(r.width_mm) for r in rectangles), default=0.0)
    minimum_columns = max(1, math.ceil(max_width / sheet_width_mm))
    return range(minimum_columns, MAX_SHEET_GRID + 1)


def is_better(candidate: PackingResult, packed_height_mm: float, best: Optional[PackingResult]) -> bool:
    """
    Candidate ordering: least waste; within the tie tolerance prefer fewer rows,
    then fewer columns, then a shorter packing.
    """
    if best is None:
        return True
    if candidate.waste_area < best.waste_area - WASTE_TIE_TOLERANCE:
        return True
    if abs(candidate.waste_area - best.waste_area) >= WASTE_TIE_TOLERANCE:
        return False
    if candidate.rows != best.rows:
        return candidate.rows < best.rows
    if candidate.columns != best.columns:
        return candidate.columns < best.columns
    return packed_height_mm < best.layout_height_mm


def optimise_packing_layout(
    rectangles: Sequence[Rectangle],
    sheet_width_mm: float,
    sheet_height_mm: float,
) -> Optional[PackingResult]:
    """
    Search sheet-grid column counts for the placement with the least waste.
    - Every column count from the minimum up to MAX_SHEET_GRID is tried
    - Column counts the packer cannot satisfy are skipped
    - Returns None for an empty input or when no column count is feasible
    """
    if not rectangles:
        return None

    sheet_width_mm = float(sheet_width_mm)
    sheet_height_mm = float(sheet_height_mm)

    ordered = packing_order(rectangles)
    used_area = total_area(ordered)

    best: Optional[PackingResult] = None

    for columns in column_range(ordered, sheet_width_mm):
        max_layout_width = columns * sheet_width_mm
        try:
            packing = pack_within_width(ordered, max_layout_width)
        except NoFit as e:
            logger.debug(f"columns={columns} skipped: {e}")
            continue

        rows = max(1, math.ceil(packing.total_height_mm / sheet_height_mm))
        candidate = PackingResult(
            columns=columns,
            rows=rows,
            placements=packing.placements,
            layout_width_mm=min(max_layout_width, max(sheet_width_mm, packing.used_width_mm)),
            layout_height_mm=max(packing.total_height_mm, rows * sheet_height_mm),
            waste_area=compute_waste_area(columns, rows, sheet_width_mm, sheet_height_mm, used_area),
        )

        if is_better(candidate, packing.total_height_mm, best):
            best = candidate

    if best is None:
        logger.info(f"No feasible layout for {len(rectangles)} rectangles")
    else:
        logger.info(
            f"columns={best.columns}, rows={best.rows}, "
            f"waste_area={best.waste_area:.1f}"
        )
    return best


def find_packing_layout(
    rectangles: Sequence[Rectangle],
    sheet_width_mm: float,
    sheet_height_mm: float,
) -> PackingResult:
    """Like optimise_packing_layout, but raises instead of returning None."""
    if not rectangles:
        raise ValueError("Add one or more print objects before running optimisation.")
    result = optimise_packing_layout(rectangles, sheet_width_mm, sheet_height_mm)
    if result is None:
        raise NoFeasibleLayout()
    return result
