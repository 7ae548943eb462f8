from __future__ import annotations

"""Exception taxonomy for the CSV import pipeline.

Row-scoped errors (RequiredFieldError, InvalidValueError, RowImportError) are
recovered by the orchestrator into the failing row's outcome. Batch-scoped
errors (DocumentParseError, EmptyDocumentError, TransactionError) end the run
with a top-level error result.
"""

__all__ = [
    "CSVImportError",
    "ParseError",
    "RequiredFieldError",
    "InvalidValueError",
    "OutOfRangeError",
    "RowImportError",
    "DocumentParseError",
    "EmptyDocumentError",
    "TransactionError",
]


class CSVImportError(Exception):
    """Base class for every error raised by csv_importable."""


class ParseError(CSVImportError):
    """Cell coercion failure for a single column."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.message = message


class RequiredFieldError(ParseError):
    """A required column was absent, empty or whitespace-only."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"{key} is blank")


class InvalidValueError(ParseError):
    """A present value could not be converted to the column type."""

    def __init__(
        self,
        key: str,
        type_name: str,
        raw_value: str | None,
        message: str | None = None,
    ) -> None:
        super().__init__(key, message or f"Invalid {type_name} for column: {key}")
        self.type_name = type_name
        self.raw_value = raw_value


class OutOfRangeError(InvalidValueError):
    """Numeric value parsed fine but lies outside the permitted range."""


class RowImportError(CSVImportError):
    """Domain validation failure raised by a row importer."""


class DocumentParseError(CSVImportError):
    """The raw document could not be split into a header and rows."""


class EmptyDocumentError(DocumentParseError):
    """The document has a header (or nothing) but no data rows."""

    def __init__(self, message: str = "There is no data to import") -> None:
        super().__init__(message)


class TransactionError(CSVImportError):
    """begin / commit / rollback on the transaction boundary failed."""
