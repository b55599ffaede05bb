from __future__ import annotations

import logging

from ..models.grid import MergeRegion, SheetGrid, is_blank
from ..models.line_item import QUANTITY_COL

"""Merged-cell normalization.

Descriptive columns (references, warehouse, note) are merged vertically in the
source convention and get replicated into every covered cell so each row can be
classified on its own. A merged CTN cell keeps its value in the first covered
row only; the rest are cleared so the quantity is counted once.
"""

__all__ = [
    "normalize",
]

logger = logging.getLogger(__name__)


def _clear_quantity(grid: SheetGrid, region: MergeRegion) -> None:
    """Keep the CTN only on the top row of a merged quantity cell."""
    for row in range(region.start_row + 1, region.end_row + 1):
        if row < grid.row_count:
            grid.set(row, region.start_col, None)


def _fill_region(grid: SheetGrid, region: MergeRegion) -> None:
    # 既存の値は上書きしない
    source = grid.get(region.start_row, region.start_col)
    if source is None:
        source = ""
    grid.ensure_shape(region.end_row + 1, region.end_col + 1)
    for row in range(region.start_row, region.end_row + 1):
        for col in range(region.start_col, region.end_col + 1):
            if is_blank(grid.get(row, col)):
                grid.set(row, col, source)


def normalize(grid: SheetGrid, merges: list[MergeRegion]) -> SheetGrid:
    """Apply every merge region to ``grid`` in place and return it.

    Regions are applied in the given order; on overlap the later one wins.
    Malformed regions are applied best-effort.
    """
    for region in merges:
        if region.start_col == QUANTITY_COL:
            _clear_quantity(grid, region)
        else:
            _fill_region(grid, region)
    logger.debug(f"normalized merges={len(merges)} shape={grid.row_count}x{grid.width}")
    return grid
