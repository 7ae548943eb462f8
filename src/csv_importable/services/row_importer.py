from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from ..errors import ParseError, RowImportError
from ..models.config_models import ColumnConfig, ImportConfig
from ..models.row import Row

"""Row importer protocol and the column-driven default implementation.

The orchestrator calls ``import_row(row, headers)`` once per data row, in
document order. Whatever it returns becomes the row's value; whatever it
raises becomes the row's error.
"""

__all__ = [
    "RowImporter",
    "SchemaRowImporter",
]


@runtime_checkable
class RowImporter(Protocol):
    """Per-row transformation hook supplied by the consumer."""

    def import_row(self, row: Row, headers: Sequence[str]) -> Any: ...


class SchemaRowImporter:
    """Coerces every configured column of a row into a record dict.

    All column errors of a row are collected before raising, so the user sees
    every bad cell of the row at once. ``sink`` (optional) receives each
    successfully coerced record, e.g. to insert it inside the import
    transaction; its return value becomes the row value when not None.
    """

    def __init__(
        self,
        columns: Sequence[ColumnConfig],
        *,
        sink: Callable[[dict[str, Any]], Any] | None = None,
    ) -> None:
        if not columns:
            raise ValueError("SchemaRowImporter needs at least one column")
        self.columns = list(columns)
        self.sink = sink

    @classmethod
    def from_config(
        cls,
        config: ImportConfig,
        *,
        sink: Callable[[dict[str, Any]], Any] | None = None,
    ) -> SchemaRowImporter:
        return cls(config.columns, sink=sink)

    def import_row(self, row: Row, headers: Sequence[str]) -> Any:
        record: dict[str, Any] = {}
        errors: list[str] = []
        for column in self.columns:
            try:
                record[column.output_key] = column.to_spec().parse_row(row)
            except ParseError as e:
                errors.append(e.message)
        if errors:
            raise RowImportError(", ".join(errors))

        if self.sink is not None:
            stored = self.sink(record)
            if stored is not None:
                return stored
        return record
