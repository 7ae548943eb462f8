from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Import result models.

RowOutcome is the per-row verdict, ImportResult the batch verdict. Both
derive their status from their contents, so "error iff errors present" and
"any failed row fails the batch" cannot drift out of sync.
"""

__all__ = [
    "ImportStatus",
    "RowOutcome",
    "ImportResult",
]


class ImportStatus(Enum):
    """Outcome status for a row or a whole batch."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RowOutcome:
    """Result of feeding one data row through the row importer."""
    row_number: int  # header = 1, first data row = 2
    errors: list[str] = field(default_factory=list)
    value: Any = None

    @property
    def status(self) -> ImportStatus:
        return ImportStatus.ERROR if self.errors else ImportStatus.SUCCESS

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row_number,
            "status": self.status.value,
            "errors": list(self.errors),
            "value": self.value,
        }


@dataclass(frozen=True)
class ImportResult:
    """Batch outcome returned by CSVImporter.run().

    Either ``error`` is set (the batch failed before or outside row
    processing, no row outcomes) or ``row_outcomes`` holds one entry per data
    row in document order.
    """
    row_outcomes: list[RowOutcome] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, message: str) -> ImportResult:
        """Top-level failure with no per-row results."""
        return cls(row_outcomes=[], error=message)

    @property
    def status(self) -> ImportStatus:
        if self.error is not None:
            return ImportStatus.ERROR
        if any(not outcome.succeeded for outcome in self.row_outcomes):
            return ImportStatus.ERROR
        return ImportStatus.SUCCESS

    @property
    def succeeded(self) -> bool:
        return self.status is ImportStatus.SUCCESS

    @property
    def number_imported(self) -> int:
        return sum(1 for outcome in self.row_outcomes if outcome.succeeded)

    @property
    def failed_rows(self) -> list[RowOutcome]:
        return [outcome for outcome in self.row_outcomes if not outcome.succeeded]

    @property
    def values(self) -> list[Any]:
        return [outcome.value for outcome in self.row_outcomes]

    @property
    def display_status(self) -> str:
        return "Import Succeeded" if self.succeeded else "Import Failed with Errors"

    def formatted_errors(self) -> list[str]:
        """Human-readable error list: top-level message first, then one line per failed row."""
        lines: list[str] = []
        if self.error is not None:
            lines.append(self.error)
        for outcome in self.failed_rows:
            lines.append(f"Line {outcome.row_number}: {', '.join(outcome.errors)}")
        return lines

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the externally visible result shape."""
        return {
            "status": self.status.value,
            "results": [outcome.to_dict() for outcome in self.row_outcomes],
            "error": self.error,
        }

    def to_json(self) -> str:
        # date 等 JSON 非対応の値は str() で落とす
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)
