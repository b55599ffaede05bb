from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Batch processing result models.

Aggregates per-file outcomes of a directory run for the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # completed/failed
    ctn: int  # 完了時の総 CTN
    elapsed_seconds: float
    processed_filename: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one batch run."""
    success_files: int
    failed_files: int
    total_ctn: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
