from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..models.summary import ProcessedSummary

"""Summary workbook generator.

Fixed single-sheet layout (1-based rows, columns A..AC):

    1           Total | <grand total> | Date: | <date, merged D1:AA1>
    2           Ware House | CTN | Skid | 1 .. 24      (filled, bold, centered)
    3..         one row per warehouse entry             (bordered A..AC)
    n           SUB-TOTAL | <warehouse subtotal>        (bordered A..AC)
    n+1         grey separator, merged A..AC
    n+2         Type | Reference1 | Reference2 | CTN    (bold, bordered A..D)
    n+3..       one row per reference detail            (bordered A..D)
    m           SUB-TOTAL | | | <reference subtotal>    (bordered A..D)

Other tooling reads this layout by position; keep it stable.
"""

__all__ = [
    "SHEET_TITLE",
    "SUMMARY_COLUMNS",
    "DETAIL_COLUMNS",
    "COLUMN_WIDTHS",
    "HEADER_FILL_COLOR",
    "SEPARATOR_FILL_COLOR",
    "WorkbookRenderError",
    "format_date",
    "build_workbook",
    "render_workbook",
]

logger = logging.getLogger(__name__)

SHEET_TITLE = "Summary"
SUMMARY_COLUMNS = 29  # A..AC
DETAIL_COLUMNS = 4  # A..D
SKID_SLOTS = 24
DATE_MERGE = "D1:AA1"

DEFAULT_COLUMN_WIDTH = 13
QUANTITY_COLUMN_WIDTH = 3.3
COLUMN_WIDTHS = [
    QUANTITY_COLUMN_WIDTH if col == 4 else DEFAULT_COLUMN_WIDTH
    for col in range(1, SUMMARY_COLUMNS + 1)
]

HEADER_FILL_COLOR = "FFC9DAF8"
SEPARATOR_FILL_COLOR = "FFD9D9D9"

_THIN = Side(style="thin")
THIN_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)
BOLD = Font(bold=True)


class WorkbookRenderError(Exception):
    """Raised when the summary workbook cannot be produced."""


def format_date(d: date) -> str:
    """M/D/YYYY (no zero padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def _border_row(ws: Worksheet, row: int, columns: int) -> None:
    for col in range(1, columns + 1):
        ws.cell(row=row, column=col).border = THIN_BORDER


def _write_values(ws: Worksheet, row: int, values: list[Any]) -> None:
    for col, value in enumerate(values, start=1):
        ws.cell(row=row, column=col, value=value)


def build_workbook(summary: ProcessedSummary, today: date | None = None) -> Workbook:
    """Lay out ``summary`` on a new workbook (see module docstring)."""
    today = today or date.today()
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for col, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(col)].width = width

    # Row 1: Total / Date
    _write_values(ws, 1, ["Total", summary.grand_total, "Date:", format_date(today)])
    for col in range(1, 5):
        ws.cell(row=1, column=col).font = BOLD
    ws.merge_cells(DATE_MERGE)

    # Row 2: summary header
    header_fill = PatternFill(fill_type="solid", start_color=HEADER_FILL_COLOR, end_color=HEADER_FILL_COLOR)
    _write_values(ws, 2, ["Ware House", "CTN", "Skid", *range(1, SKID_SLOTS + 1)])
    for col in range(1, SUMMARY_COLUMNS + 1):
        cell = ws.cell(row=2, column=col)
        cell.fill = header_fill
        cell.font = BOLD
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal="center", vertical="center")

    row = 3
    for entry in summary.warehouse_summary:
        _write_values(ws, row, [entry.warehouse, entry.ctn, entry.skid])
        _border_row(ws, row, SUMMARY_COLUMNS)
        row += 1

    _write_values(ws, row, ["SUB-TOTAL", summary.warehouse_subtotal])
    ws.cell(row=row, column=1).font = BOLD
    ws.cell(row=row, column=2).font = BOLD
    _border_row(ws, row, SUMMARY_COLUMNS)
    row += 1

    # 区切り行
    separator_fill = PatternFill(fill_type="solid", start_color=SEPARATOR_FILL_COLOR, end_color=SEPARATOR_FILL_COLOR)
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=SUMMARY_COLUMNS)
    ws.cell(row=row, column=1).fill = separator_fill
    row += 1

    _write_values(ws, row, ["Type", "Reference1", "Reference2", "CTN"])
    for col in range(1, DETAIL_COLUMNS + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = BOLD
        cell.border = THIN_BORDER
        cell.alignment = Alignment(vertical="center")
    row += 1

    for detail in summary.reference_details:
        _write_values(ws, row, [detail.type, detail.reference1, detail.reference2, detail.ctn])
        _border_row(ws, row, DETAIL_COLUMNS)
        row += 1

    _write_values(ws, row, ["SUB-TOTAL", "", "", summary.reference_subtotal])
    ws.cell(row=row, column=1).font = BOLD
    ws.cell(row=row, column=4).font = BOLD
    _border_row(ws, row, DETAIL_COLUMNS)

    return wb


def render_workbook(summary: ProcessedSummary, today: date | None = None) -> bytes:
    """Render ``summary`` to .xlsx bytes."""
    try:
        wb = build_workbook(summary, today=today)
        buf = BytesIO()
        wb.save(buf)
    except Exception as e:
        raise WorkbookRenderError(f"failed to render summary workbook: {e}") from e
    data = buf.getvalue()
    logger.debug(f"rendered summary workbook bytes={len(data)}")
    return data
