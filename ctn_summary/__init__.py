"""Shipment CTN summary generator.

Turns a warehouse shipment line-item workbook into a per-destination carton
summary and renders it as a fixed-layout output workbook.
"""

from .services.pipeline import process_spreadsheet, render_summary

__all__ = [
    "process_spreadsheet",
    "render_summary",
]
