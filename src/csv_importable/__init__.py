"""Transactional CSV import: per-column coercion, per-row import, all-or-nothing commit."""

from .errors import (
    CSVImportError,
    DocumentParseError,
    EmptyDocumentError,
    InvalidValueError,
    OutOfRangeError,
    ParseError,
    RequiredFieldError,
    RowImportError,
    TransactionError,
)
from .models import ImportResult, ImportStatus, ParsedDocument, Row, RowOutcome
from .parsers.type_parser import ColumnSpec, ColumnType, TypeParser, parse_value
from .services.dispatch import Scheduler, dispatch_import
from .services.orchestrator import CSVImporter, ExecutionMode, ImportHooks
from .services.row_importer import RowImporter, SchemaRowImporter

__version__ = "0.1.0"

__all__ = [
    "CSVImportError",
    "CSVImporter",
    "ColumnSpec",
    "ColumnType",
    "DocumentParseError",
    "EmptyDocumentError",
    "ExecutionMode",
    "ImportHooks",
    "ImportResult",
    "ImportStatus",
    "InvalidValueError",
    "OutOfRangeError",
    "ParseError",
    "ParsedDocument",
    "RequiredFieldError",
    "Row",
    "RowImportError",
    "RowImporter",
    "RowOutcome",
    "Scheduler",
    "SchemaRowImporter",
    "TypeParser",
    "dispatch_import",
    "parse_value",
]
