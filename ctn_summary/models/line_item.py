from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from .grid import SheetGrid, cell_text, is_absent

"""LineItem model: the fixed-position fields of one shipment data row.

Column layout of the source convention (0-based):
    0  reference1 (分货号)
    2  reference2 (参考号)
    3  CTN quantity (箱数)
    12 destination warehouse code (目的仓库)
    13 note (备注)
"""

__all__ = [
    "LineItem",
    "REFERENCE1_COL",
    "REFERENCE2_COL",
    "QUANTITY_COL",
    "WAREHOUSE_COL",
    "NOTE_COL",
    "MIN_ROW_WIDTH",
    "parse_quantity",
    "is_excluded_quantity",
    "extract_line_item",
]

REFERENCE1_COL = 0
REFERENCE2_COL = 2
QUANTITY_COL = 3
WAREHOUSE_COL = 12
NOTE_COL = 13
MIN_ROW_WIDTH = QUANTITY_COL + 1

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class LineItem:
    row_number: int  # 1-based sheet row
    reference1: str
    reference2: str
    ctn: int
    warehouse_code: str
    note: str

    @property
    def has_references(self) -> bool:
        return bool(self.reference1) and bool(self.reference2)


def parse_quantity(value: Any) -> int:
    """Parse a CTN cell as an integer, using its leading integer digits.

    Non-numeric text yields 0. ``"12 ctns"`` -> 12, ``3.7`` -> 3.
    """
    if is_absent(value) or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    m = _INT_PREFIX.match(cell_text(value))
    return int(m.group(1)) if m else 0


def is_excluded_quantity(raw_text: str) -> bool:
    """Formula remnants and total lines in the CTN column are never line items."""
    return "=" in raw_text or "total" in raw_text.lower()


def extract_line_item(grid: SheetGrid, row: int) -> LineItem | None:
    """Build the LineItem for ``row`` or return None when the skip policy applies."""
    if grid.width < MIN_ROW_WIDTH:
        return None
    raw_quantity = grid.get(row, QUANTITY_COL)
    raw_text = cell_text(raw_quantity)
    if raw_text.strip() == "" or is_excluded_quantity(raw_text):
        return None
    ctn = parse_quantity(raw_quantity)
    if ctn <= 0:
        return None
    return LineItem(
        row_number=row + 1,
        reference1=grid.text(row, REFERENCE1_COL).strip(),
        reference2=grid.text(row, REFERENCE2_COL).strip(),
        ctn=ctn,
        warehouse_code=grid.text(row, WAREHOUSE_COL).strip(),
        note=grid.text(row, NOTE_COL).strip(),
    )
