from __future__ import annotations

import logging
from datetime import date

from ..excel.locator import find_container_number, find_data_start_row
from ..excel.normalizer import normalize
from ..excel.reader import read_first_sheet
from ..excel.writer import render_workbook
from ..models.summary import ProcessedSummary
from .aggregator import aggregate

"""Core pipeline: spreadsheet bytes -> ProcessedSummary -> summary workbook bytes.

Synchronous and self-contained per call; no file I/O. Any stage failure
propagates and no partial summary is returned.
"""

__all__ = [
    "process_spreadsheet",
    "render_summary",
]

logger = logging.getLogger(__name__)


def process_spreadsheet(sheet_bytes: bytes) -> ProcessedSummary:
    sheet = read_first_sheet(sheet_bytes)
    grid = normalize(sheet.grid, sheet.merges)
    container_number = find_container_number(grid)
    data_start_row = find_data_start_row(grid)
    logger.debug(
        f"sheet={sheet.sheet_name} container={container_number or '-'} "
        f"data_start_row={data_start_row + 1}"
    )
    state = aggregate(grid, data_start_row)
    summary = state.to_summary(container_number)
    logger.debug(
        f"warehouses={len(summary.warehouse_summary)} details={len(summary.reference_details)} "
        f"total={summary.total} dropped={len(state.dropped_rows)}"
    )
    return summary


def render_summary(summary: ProcessedSummary, today: date | None = None) -> bytes:
    return render_workbook(summary, today=today)
