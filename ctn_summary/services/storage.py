from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from ..models.processed_file import FileStatus, ProcessedFile
from ..models.summary import ProcessedSummary

"""In-memory store for ProcessedFile status records.

Ids are sequential from 1. Records are immutable; updates swap in a copy.
Nothing is persisted across process restarts.
"""

__all__ = [
    "ProcessedFileStore",
]


class ProcessedFileStore:
    """Status records for processed uploads, keyed by sequential id."""

    def __init__(self) -> None:
        self._files: dict[int, ProcessedFile] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._files)

    def create(
        self,
        original_filename: str,
        processed_filename: str,
        file_size: int,
        status: FileStatus = FileStatus.PROCESSING,
        total_records: int = 0,
        error_message: str | None = None,
    ) -> ProcessedFile:
        """Register a new record and return it.

        Args:
            original_filename: Name the workbook was uploaded under
            processed_filename: Name of the summary workbook to be written
            file_size: Upload size in bytes
            status: Initial status (processing by default)
            total_records: Initial CTN total
            error_message: Initial failure message, if any

        Returns:
            The stored record with its assigned id
        """
        now = datetime.now(UTC)
        record = ProcessedFile(
            id=self._next_id,
            original_filename=original_filename,
            processed_filename=processed_filename,
            status=status,
            file_size=file_size,
            total_records=total_records,
            error_message=error_message,
            created_at=now,
            updated_at=now,
        )
        self._files[record.id] = record
        self._next_id += 1
        return record

    def get(self, file_id: int) -> ProcessedFile | None:
        """Return the record for ``file_id``, or None when unknown."""
        return self._files.get(file_id)

    def update_status(
        self, file_id: int, status: FileStatus, error_message: str | None = None
    ) -> ProcessedFile | None:
        """Set the status of a record and refresh its updated_at.

        Args:
            file_id: Record id
            status: New status
            error_message: Replaces the stored message when given

        Returns:
            The updated record, or None when ``file_id`` is unknown
        """
        record = self._files.get(file_id)
        if record is None:
            return None
        changes: dict[str, object] = {"status": status, "updated_at": datetime.now(UTC)}
        if error_message is not None:
            changes["error_message"] = error_message
        updated = replace(record, **changes)  # type: ignore[arg-type]
        self._files[file_id] = updated
        return updated

    def complete(self, file_id: int, summary: ProcessedSummary) -> ProcessedFile | None:
        """Mark a record completed and attach its summary and CTN total."""
        record = self._files.get(file_id)
        if record is None:
            return None
        updated = replace(
            record,
            status=FileStatus.COMPLETED,
            total_records=summary.total,
            processed_data=summary,
            updated_at=datetime.now(UTC),
        )
        self._files[file_id] = updated
        return updated

    def recent(self, limit: int = 10) -> list[ProcessedFile]:
        """Return up to ``limit`` records, newest first."""
        # created_at が同一の場合は id 降順
        ordered = sorted(self._files.values(), key=lambda f: (f.created_at, f.id), reverse=True)
        return ordered[:limit]

    def delete(self, file_id: int) -> bool:
        return self._files.pop(file_id, None) is not None
