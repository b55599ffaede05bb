from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines failure log.

``row=-1`` is the sentinel for file-level failures where no sheet row applies
(unreadable workbook, rendering or output write errors).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded filename being processed
        sheet: Sheet name, or ``<FILE_LEVEL>`` when unknown
        row: Row number (1-based). Use -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Exception message, verbatim
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int  # 行番号。不明な場合 -1 許容
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
