from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO

import openpyxl

from ..models.grid import MergeRegion, SheetGrid

"""Workbook reader: raw .xlsx bytes -> first worksheet grid + merge regions.

Cached formula values are read (``data_only=True``), matching what the sheet
displays. openpyxl blanks every covered cell of a merged range except the
top-left one, which is what the normalizer expects.
"""

__all__ = [
    "RawSheet",
    "SpreadsheetReadError",
    "read_first_sheet",
]

logger = logging.getLogger(__name__)


class SpreadsheetReadError(Exception):
    """Raised when the uploaded bytes are not a readable workbook."""


@dataclass
class RawSheet:
    sheet_name: str
    grid: SheetGrid
    merges: list[MergeRegion]


def read_first_sheet(data: bytes) -> RawSheet:
    if not data:
        raise SpreadsheetReadError("empty workbook data")
    try:
        wb = openpyxl.load_workbook(BytesIO(data), data_only=True)
    except Exception as e:
        raise SpreadsheetReadError(f"unreadable workbook: {e}") from e

    try:
        if not wb.worksheets:
            raise SpreadsheetReadError("workbook contains no worksheets")
        ws = wb.worksheets[0]
        rows = [list(r) for r in ws.iter_rows(values_only=True)]
        # MultiCellRange は順序を保持しないため左上セルの行優先で並べる
        merges = sorted(
            (
                MergeRegion(
                    start_row=rng.min_row - 1,
                    end_row=rng.max_row - 1,
                    start_col=rng.min_col - 1,
                    end_col=rng.max_col - 1,
                )
                for rng in ws.merged_cells.ranges
            ),
            key=lambda m: (m.start_row, m.start_col, m.end_row, m.end_col),
        )
        sheet_name = ws.title
    finally:
        wb.close()

    logger.debug(f"sheet={sheet_name} rows={len(rows)} merges={len(merges)}")
    return RawSheet(sheet_name=sheet_name, grid=SheetGrid.from_rows(rows), merges=merges)
