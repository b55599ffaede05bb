from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from ..excel.reader import SpreadsheetReadError
from ..excel.writer import WorkbookRenderError
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord
from ..models.processed_file import FileStatus, ProcessedFile
from ..models.summary import ProcessedSummary
from .pipeline import process_spreadsheet, render_summary
from .storage import ProcessedFileStore

"""Upload handling around the core pipeline.

Validates the upload, keeps the ProcessedFile status record current, and
writes the rendered workbook under a generated name. Processing is inline:
the returned record is already in a terminal state (completed | failed).
"""

__all__ = [
    "DEFAULT_MAX_FILE_SIZE",
    "UploadValidationError",
    "validate_upload",
    "safe_filename",
    "make_processed_filename",
    "process_upload",
    "load_summary",
    "output_path",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_SUFFIX = ".xlsx"
FILE_LEVEL_SHEET = "<FILE_LEVEL>"

_UNSAFE_CHARS = re.compile(r"[^\w\s.-]", re.ASCII)


class UploadValidationError(Exception):
    """Raised when an upload is rejected before any processing starts."""


def validate_upload(filename: str, size: int, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
    """Check name, suffix and size of an upload before it is processed.

    Args:
        filename: Uploaded file name
        size: Upload size in bytes
        max_file_size: Largest accepted size in bytes

    Raises:
        UploadValidationError: If the upload is not acceptable
    """
    if not filename:
        raise UploadValidationError("filename is required")
    if not filename.endswith(ALLOWED_SUFFIX):
        raise UploadValidationError("Only .xlsx files are allowed")
    if size < 1:
        raise UploadValidationError("uploaded file is empty")
    if size > max_file_size:
        raise UploadValidationError(f"file too large: {size} bytes (max {max_file_size})")


def safe_filename(filename: str) -> str:
    """Return ``filename`` with every ``_UNSAFE_CHARS`` match replaced by "_"."""
    return _UNSAFE_CHARS.sub("_", filename)


def make_processed_filename(filename: str, timestamp_ms: int | None = None) -> str:
    """Return ``processed_{timestamp_ms}_{safe name}`` for an uploaded file name."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"processed_{timestamp_ms}_{safe_filename(filename)}"


def _error_type(exc: Exception) -> str:
    if isinstance(exc, SpreadsheetReadError):
        return "SPREADSHEET_READ_ERROR"
    if isinstance(exc, WorkbookRenderError):
        return "WORKBOOK_RENDER_ERROR"
    if isinstance(exc, OSError):
        return "OUTPUT_WRITE_ERROR"
    return "PROCESSING_ERROR"


def process_upload(
    filename: str,
    data: bytes,
    *,
    store: ProcessedFileStore,
    output_dir: Path,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessedFile:
    """Process one uploaded workbook end to end.

    Raises UploadValidationError for rejected uploads (no record is created).
    Pipeline or write failures are not raised; they leave the record ``failed``
    with the exception message.
    """
    validate_upload(filename, len(data), max_file_size)

    processed_filename = make_processed_filename(filename)
    record = store.create(
        original_filename=filename,
        processed_filename=processed_filename,
        file_size=len(data),
    )
    target = Path(output_dir) / processed_filename
    created = False

    try:
        summary = process_spreadsheet(data)
        output = render_summary(summary)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("xb") as f:
            created = True
            f.write(output)
    except Exception as e:
        logger.error(f"processing failed file={filename}: {e}")
        if created and target.exists():
            # 書き込み途中の出力は残さない
            target.unlink()
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(
                    file=filename,
                    sheet=FILE_LEVEL_SHEET,
                    row=-1,
                    error_type=_error_type(e),
                    message=str(e),
                )
            )
        failed = store.update_status(record.id, FileStatus.FAILED, str(e))
        return failed if failed is not None else record

    logger.info(f"processed file={filename} -> {processed_filename} total={summary.total}")
    completed = store.complete(record.id, summary)
    return completed if completed is not None else record


def _completed_record(store: ProcessedFileStore, file_id: int) -> ProcessedFile:
    record = store.get(file_id)
    if record is None or record.status is not FileStatus.COMPLETED:
        raise LookupError(f"processed file {file_id} not found or not ready")
    return record


def load_summary(store: ProcessedFileStore, file_id: int) -> ProcessedSummary:
    """Return the summary of a completed record.

    Raises:
        LookupError: If the record is missing, not completed, or has no summary
    """
    record = _completed_record(store, file_id)
    if record.processed_data is None:
        raise LookupError(f"processed data not found for file {file_id}")
    return record.processed_data


def output_path(store: ProcessedFileStore, file_id: int, output_dir: Path) -> Path:
    """Return the path of the summary workbook written for a completed record.

    Raises:
        LookupError: If the record is not completed or the file is gone
    """
    record = _completed_record(store, file_id)
    path = Path(output_dir) / record.processed_filename
    if not path.exists():
        raise LookupError(f"output file does not exist: {path.name}")
    return path
