from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import pandas as pd

"""Cell grid model for a single parsed worksheet.

The grid is a rectangular pandas frame (object dtype) addressed by 0-based
row/column positions. Cells outside the frame or holding None/NaN are "absent";
absent and empty-string cells are both treated as blank by the pipeline.
"""

__all__ = [
    "MergeRegion",
    "SheetGrid",
    "cell_text",
    "is_absent",
    "is_blank",
]


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT


def cell_text(value: Any) -> str:
    """Render a cell value the way it is displayed in the sheet.

    Integral floats lose their trailing ``.0`` so that ``12.0`` and ``12`` read
    the same (numeric cells are stored as floats by some writers).
    """
    if is_absent(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_blank(value: Any) -> bool:
    return cell_text(value).strip() == ""


@dataclass(frozen=True)
class MergeRegion:
    """Rectangular merged span, 0-based and inclusive on both ends."""
    start_row: int
    end_row: int
    start_col: int
    end_col: int


class SheetGrid:
    """Fixed-width row grid backed by a pandas DataFrame.

    ``width`` is the number of columns the source sheet spans; it only grows
    when a merge region reaches past the parsed data.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        frame = frame.astype(object)
        frame.index = range(len(frame.index))
        frame.columns = range(len(frame.columns))
        self.frame = frame

    @classmethod
    def from_rows(cls, rows: list[list[Any]] | list[tuple[Any, ...]]) -> SheetGrid:
        width = max((len(r) for r in rows), default=0)
        padded = [list(r) + [None] * (width - len(r)) for r in rows]
        return cls(pd.DataFrame(padded, columns=range(width), dtype=object))

    @property
    def row_count(self) -> int:
        return len(self.frame.index)

    @property
    def width(self) -> int:
        return len(self.frame.columns)

    def ensure_shape(self, rows: int, cols: int) -> None:
        """Grow the frame (with absent cells) to at least ``rows`` x ``cols``."""
        if rows <= self.row_count and cols <= self.width:
            return
        self.frame = self.frame.reindex(
            index=range(max(rows, self.row_count)),
            columns=range(max(cols, self.width)),
        ).astype(object)

    def get(self, row: int, col: int) -> Any:
        if row < 0 or col < 0 or row >= self.row_count or col >= self.width:
            return None
        value = self.frame.iat[row, col]
        return None if is_absent(value) else value

    def set(self, row: int, col: int, value: Any) -> None:
        self.ensure_shape(row + 1, col + 1)
        self.frame.iat[row, col] = value

    def text(self, row: int, col: int) -> str:
        return cell_text(self.get(row, col))

    def row_texts(self, row: int, limit: int | None = None) -> list[str]:
        stop = self.width if limit is None else min(limit, self.width)
        return [self.text(row, c) for c in range(stop)]

    def is_row_empty(self, row: int) -> bool:
        return all(is_blank(self.get(row, c)) for c in range(self.width))
