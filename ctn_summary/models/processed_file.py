from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .summary import ProcessedSummary

"""ProcessedFile status record and FileStatus enum.

State transitions: processing → (completed | failed)
"""

__all__ = [
    "FileStatus",
    "ProcessedFile",
]


class FileStatus(Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ProcessedFile:
    """Status record for one uploaded workbook."""
    id: int
    original_filename: str
    processed_filename: str  # 生成ファイル名 (出力先のキー)
    status: FileStatus
    file_size: int
    total_records: int
    error_message: str | None
    created_at: datetime
    updated_at: datetime
    processed_data: ProcessedSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "originalFilename": self.original_filename,
            "processedFilename": self.processed_filename,
            "status": self.status.value,
            "fileSize": self.file_size,
            "totalRecords": self.total_records,
            "errorMessage": self.error_message,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
