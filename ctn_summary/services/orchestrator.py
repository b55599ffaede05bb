from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import SummaryConfig
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.processed_file import FileStatus
from ..models.processing_result import FileStat, ProcessingResult
from .progress import ProgressTracker
from .storage import ProcessedFileStore
from .upload import FILE_LEVEL_SHEET, UploadValidationError, process_upload

"""Batch orchestration: run every workbook of a directory through process_upload.

Each file is independent; a failed file never stops the batch.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal batch error (input directory unusable)."""


def scan_excel_files(directory: Path) -> list[Path]:
    """Return the .xlsx files of ``directory`` (non-recursive, sorted by name).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == ".xlsx")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def process_all(
    config: SummaryConfig,
    store: ProcessedFileStore | None = None,
    files: Iterable[Path] | None = None,
) -> ProcessingResult:
    """Summarize ``files`` (default: every workbook in config.source_directory)."""
    start_time = datetime.now(UTC)
    store = store if store is not None else ProcessedFileStore()
    error_log = ErrorLogBuffer()
    output_dir = Path(config.output_directory)

    file_paths = list(files) if files is not None else scan_excel_files(Path(config.source_directory))

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_ctn = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)

            try:
                data = file_path.read_bytes()
                record = process_upload(
                    file_path.name,
                    data,
                    store=store,
                    output_dir=output_dir,
                    max_file_size=config.max_file_size_bytes,
                    error_log=error_log,
                )
            except (OSError, UploadValidationError) as e:
                # レコード作成前の失敗
                logger.error(f"rejected file={file_path.name}: {e}")
                error_log.append(
                    ErrorRecord.create(
                        file=file_path.name,
                        sheet=FILE_LEVEL_SHEET,
                        row=-1,
                        error_type="UPLOAD_REJECTED",
                        message=str(e),
                    )
                )
                status, ctn, processed_name, error = FileStatus.FAILED, 0, None, str(e)
            else:
                status = record.status
                ctn = record.total_records
                processed_name = record.processed_filename if status is FileStatus.COMPLETED else None
                error = record.error_message

            elapsed = (datetime.now(UTC) - file_start).total_seconds()
            if status is FileStatus.COMPLETED:
                success_count += 1
                total_ctn += ctn
            else:
                failed_count += 1

            progress.set_postfix(success=success_count, failed=failed_count, ctn=total_ctn)
            progress.finish_file()

            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=status.value,
                    ctn=ctn,
                    elapsed_seconds=elapsed,
                    processed_filename=processed_name,
                    error=error,
                )
            )

    try:
        error_log.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_ctn=total_ctn,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
