from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the structured import error log.

One record per failed row error, or per document-level failure. Document-level
records use row=-1 because no single row is to blame.
"""

__all__ = [
    "ErrorRecord",
    "DOCUMENT_LEVEL_ROW",
]

DOCUMENT_LEVEL_ROW = -1


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        document: name of the CSV document being imported
        row: user-facing row number (header = 1). -1 for document-level errors
        error_type: classification in UPPER_SNAKE_CASE (REQUIRED_FIELD, INVALID_VALUE, ...)
        message: the error message shown to the user
    """
    timestamp: str  # ISO8601 UTC
    document: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(document: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            document=document,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # 追加キー阻止: dataclass -> dict して json.dumps
        return json.dumps(asdict(self), ensure_ascii=False)
