from __future__ import annotations

import logging
import re

from ..models.grid import SheetGrid

"""Locators for the container number and the start of the tabular data."""

__all__ = [
    "CONTAINER_PATTERN",
    "QUANTITY_HEADER_TOKENS",
    "DEFAULT_DATA_START_ROW",
    "find_container_number",
    "find_data_start_row",
]

logger = logging.getLogger(__name__)

# e.g. OOCU8186130
CONTAINER_PATTERN = re.compile(r"[A-Z]{4}\d{7,}", re.ASCII)
CONTAINER_SCAN_ROWS = 5
CONTAINER_SCAN_COLS = 15

QUANTITY_HEADER_TOKENS = ("ctn", "箱数")
DEFAULT_DATA_START_ROW = 2  # タイトル行 + ヘッダ行


def find_container_number(grid: SheetGrid) -> str:
    """Return the first container code found in the top-left header block, or ""."""
    for row in range(min(CONTAINER_SCAN_ROWS, grid.row_count)):
        for text in grid.row_texts(row, limit=CONTAINER_SCAN_COLS):
            m = CONTAINER_PATTERN.search(text)
            if m:
                return m.group(0)
    return ""


def find_data_start_row(grid: SheetGrid) -> int:
    """Return the row index after the first quantity header cell.

    Falls back to DEFAULT_DATA_START_ROW when no header keyword is present.
    """
    for row in range(grid.row_count):
        for text in grid.row_texts(row):
            lowered = text.lower()
            if any(token in lowered for token in QUANTITY_HEADER_TOKENS):
                return row + 1
    logger.debug(f"quantity header not found -> default data start row {DEFAULT_DATA_START_ROW}")
    return DEFAULT_DATA_START_ROW
