"""Domain models for the CSV importer.

Parsed rows, per-row and per-document results, error log records and the
typed configuration.
"""

from .config_models import ColumnConfig, DatabaseConfig, ImportConfig
from .error_record import ErrorRecord
from .import_result import ImportResult, ImportStatus, RowOutcome
from .row import ParsedDocument, Row

__all__ = [
    # Configuration models
    "ColumnConfig",
    "DatabaseConfig",
    "ImportConfig",
    # Document models
    "ParsedDocument",
    "Row",
    # Result models
    "ErrorRecord",
    "ImportResult",
    "ImportStatus",
    "RowOutcome",
]
