from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

"""Row model for the CSV import pipeline.

A Row is one data record of the parsed document: header name -> raw text.
Values are kept exactly as the document parser produced them; ``None`` means
the cell was absent (short row), which is different from an empty string.
"""

__all__ = [
    "Row",
    "ParsedDocument",
]


@dataclass(frozen=True)
class Row:
    """Immutable header-keyed view of one CSV data record.

    row_number is the user-facing line number: the header is line 1, so the
    first data row is 2.
    """
    row_number: int
    values: Mapping[str, str | None]

    def __post_init__(self) -> None:
        # 読み取り専用ビューに差し替え (frozen なので object.__setattr__)
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def field(self, key: str) -> str | None:
        """Look a cell up by header name: exact, then upper-case, then lower-case."""
        for candidate in (key, key.upper(), key.lower()):
            value = self.values.get(candidate)
            if value is not None:
                return value
        return None

    def __getitem__(self, key: str) -> str | None:
        return self.field(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return any(k in self.values for k in (key, key.upper(), key.lower()))

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, str | None]:
        return dict(self.values)


@dataclass(frozen=True)
class ParsedDocument:
    """Output of the document parser: compacted headers plus data rows."""
    headers: list[str]
    rows: list[Row]

    @property
    def row_count(self) -> int:
        return len(self.rows)
