from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..db.transaction import NullTransaction, Transaction
from ..document.reader import DocumentSource, parse_document
from ..errors import (
    DocumentParseError,
    EmptyDocumentError,
    InvalidValueError,
    RequiredFieldError,
    RowImportError,
    TransactionError,
)
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import get_logger, log_summary
from ..models.config_models import DEFAULT_BIG_FILE_THRESHOLD, ImportConfig
from ..models.error_record import DOCUMENT_LEVEL_ROW, ErrorRecord
from ..models.import_result import ImportResult, RowOutcome
from ..models.row import ParsedDocument, Row
from .progress import RowProgressTracker
from .row_importer import RowImporter, SchemaRowImporter
from .summary import render_result_lines, render_summary_line

"""Batch import orchestration.

CSVImporter.run() does, in order:

1. BEGIN on the transaction boundary
2. destroy existing records when should_replace is set
3. parse the document (EmptyDocumentError when there are no data rows)
4. before_rows hook, then every data row through the row importer. A row that
   raises is recorded as that row's error and the scan moves on, so one pass
   reports every bad row
5. after_rows hook with the row values
6. COMMIT if every row succeeded, ROLLBACK otherwise

Anything raised outside the per-row guard (parsing, hooks, destroy, the
transaction itself) ends the run with a top-level error result and no row
outcomes; the transaction is rolled back if it is still open.
"""

__all__ = [
    "BIG_FILE_THRESHOLD",
    "CSVImporter",
    "ExecutionMode",
    "ImportHooks",
]

logger = logging.getLogger(__name__)

BIG_FILE_THRESHOLD = DEFAULT_BIG_FILE_THRESHOLD


class ExecutionMode(Enum):
    """How a caller should run an import."""
    IMMEDIATE = "immediate"
    DEFERRED = "deferred"


def _noop(*args: Any) -> None:
    return None


@dataclass(frozen=True)
class ImportHooks:
    """Optional callbacks around row processing. Both default to no-ops."""
    before_rows: Callable[[], None] = _noop
    after_rows: Callable[[list[Any]], None] = _noop


def _error_type(exc: BaseException, *, row_level: bool) -> str:
    if isinstance(exc, RequiredFieldError):
        return "REQUIRED_FIELD"
    if isinstance(exc, InvalidValueError):
        return "INVALID_VALUE"
    if isinstance(exc, RowImportError):
        return "ROW_IMPORT_ERROR"
    if isinstance(exc, EmptyDocumentError):
        return "EMPTY_DOCUMENT"
    if isinstance(exc, DocumentParseError):
        return "DOCUMENT_PARSE_ERROR"
    if isinstance(exc, TransactionError):
        return "TRANSACTION_ERROR"
    return "UNHANDLED_ROW_ERROR" if row_level else "PROCESSING_ERROR"


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class CSVImporter:
    """Runs one CSV document through a RowImporter with all-or-nothing semantics.

    Exactly one of ``document`` (raw text) or ``source`` (re-readable
    DocumentSource) must be given. ``destroy_existing`` is required when
    ``should_replace`` is set.
    """

    def __init__(
        self,
        row_importer: RowImporter,
        *,
        document: str | bytes | None = None,
        source: DocumentSource | None = None,
        transaction: Transaction | None = None,
        should_replace: bool = False,
        destroy_existing: Callable[[], None] | None = None,
        hooks: ImportHooks | None = None,
        big_file_threshold: int = BIG_FILE_THRESHOLD,
        document_name: str = "<document>",
        error_log: ErrorLogBuffer | None = None,
        show_progress: bool = True,
    ) -> None:
        if row_importer is None:
            raise ValueError(f"row_importer is required for {type(self).__name__}")
        if document is None and source is None:
            raise ValueError(f"document or source is required for {type(self).__name__}")
        if document is not None and source is not None:
            raise ValueError("pass either document or source, not both")
        if should_replace and destroy_existing is None:
            raise ValueError("destroy_existing is required when should_replace is set")
        if big_file_threshold < 0:
            raise ValueError("big_file_threshold must be >= 0")

        self.row_importer = row_importer
        self.transaction: Transaction = transaction if transaction is not None else NullTransaction()
        self.should_replace = should_replace
        self.destroy_existing = destroy_existing
        self.hooks = hooks or ImportHooks()
        self.big_file_threshold = big_file_threshold
        self.document_name = document_name
        self.error_log = error_log
        self.show_progress = show_progress
        self.results: ImportResult | None = None

        self._document = document
        self._source = source
        self._parsed: ParsedDocument | None = None

    @classmethod
    def from_config(
        cls,
        config: ImportConfig,
        row_importer: RowImporter | None = None,
        *,
        sink: Callable[[dict[str, Any]], Any] | None = None,
        **kwargs: Any,
    ) -> CSVImporter:
        """Build an importer from config/import.yml settings.

        Without an explicit row_importer a SchemaRowImporter over the
        configured columns is used.
        """
        if row_importer is None:
            row_importer = SchemaRowImporter.from_config(config, sink=sink)
        kwargs.setdefault("big_file_threshold", config.big_file_threshold)
        kwargs.setdefault("should_replace", config.should_replace)
        if config.error_log_dir and "error_log" not in kwargs:
            kwargs["error_log"] = ErrorLogBuffer(config.error_log_dir)
        return cls(row_importer, **kwargs)

    # ------------------------------------------------------------------
    # document

    def _read_raw(self) -> str | bytes:
        if self._document is not None:
            return self._document
        try:
            return self._source.read_document()  # type: ignore[union-attr]
        except OSError as e:
            raise DocumentParseError(f"could not read document {self.document_name}: {e}") from e
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"could not decode CSV as UTF-8: {e}") from e

    def parse(self) -> ParsedDocument:
        """Parse the document.

        Text given as ``document`` is parsed once and reused until the end of
        the next run. A ``source`` is read again on every call, so a deferred
        run sees the source as it is when the run starts.
        """
        if self._parsed is not None:
            return self._parsed
        parsed = parse_document(self._read_raw())
        if self._source is None:
            self._parsed = parsed
        return parsed

    def is_large_document(self) -> bool:
        """True when the data row count exceeds big_file_threshold.

        A document that cannot be parsed is not large: running it immediately
        surfaces the parse error in the result.
        """
        try:
            row_count = self.parse().row_count
        except DocumentParseError as e:
            logger.debug("document=%s not parseable for size check: %s", self.document_name, e)
            return False
        return row_count > self.big_file_threshold

    def execution_mode(self) -> ExecutionMode:
        return ExecutionMode.DEFERRED if self.is_large_document() else ExecutionMode.IMMEDIATE

    # ------------------------------------------------------------------
    # run

    def run(self) -> ImportResult:
        """Import every row; commit only if all rows succeeded."""
        out = get_logger()
        out.info(f"Importing with {type(self).__name__}...")
        started = time.perf_counter()

        transaction_open = False
        try:
            self.transaction.begin()
            transaction_open = True

            if self.should_replace:
                self.destroy_existing()  # type: ignore[misc]

            document = self.parse()
            self.hooks.before_rows()
            outcomes = self._process_rows(document)
            self.hooks.after_rows([outcome.value for outcome in outcomes])

            result = ImportResult(row_outcomes=outcomes)
            if result.succeeded:
                self.transaction.commit()
                transaction_open = False
            else:
                # 1 行でも失敗したら全体ロールバック
                transaction_open = False
                self.transaction.rollback()
        except Exception as e:
            if transaction_open:
                self._rollback_after_failure()
            logger.debug("document=%s import aborted", self.document_name, exc_info=True)
            self._append_error(DOCUMENT_LEVEL_ROW, _error_type(e, row_level=False), _error_message(e))
            result = ImportResult.failed(_error_message(e))

        # Row は run の外に持ち越さない
        self._parsed = None
        self.results = result
        self._report(result, time.perf_counter() - started)
        self._flush_error_log()
        return result

    @property
    def succeeded(self) -> bool:
        return self.results is not None and self.results.succeeded

    @property
    def number_imported(self) -> int:
        return self.results.number_imported if self.results is not None else 0

    # ------------------------------------------------------------------
    # internals

    def _process_rows(self, document: ParsedDocument) -> list[RowOutcome]:
        outcomes: list[RowOutcome] = []
        headers = list(document.headers)
        tracker = RowProgressTracker(document.row_count) if self.show_progress else None
        try:
            for row in document.rows:
                outcome = self._process_row(row, headers)
                outcomes.append(outcome)
                if tracker is not None:
                    tracker.advance(success=outcome.succeeded)
        finally:
            if tracker is not None:
                tracker.close()
        return outcomes

    def _process_row(self, row: Row, headers: Sequence[str]) -> RowOutcome:
        try:
            value = self.row_importer.import_row(row, headers)
        except Exception as e:
            message = _error_message(e)
            logger.debug("document=%s row=%d failed: %s", self.document_name, row.row_number, message)
            self._append_error(row.row_number, _error_type(e, row_level=True), message)
            return RowOutcome(row_number=row.row_number, errors=[message])
        return RowOutcome(row_number=row.row_number, value=value)

    def _rollback_after_failure(self) -> None:
        try:
            self.transaction.rollback()
        except TransactionError as rollback_e:
            # 元のエラーを優先し、ロールバック失敗は記録のみ
            get_logger().warning(f"rollback failed: {rollback_e}")
            self._append_error(DOCUMENT_LEVEL_ROW, "TRANSACTION_ERROR", str(rollback_e))

    def _append_error(self, row: int, error_type: str, message: str) -> None:
        if self.error_log is None:
            return
        self.error_log.append(ErrorRecord.create(self.document_name, row, error_type, message))

    def _flush_error_log(self) -> None:
        if self.error_log is None:
            return
        try:
            path = self.error_log.flush()
        except OSError as e:
            get_logger().warning(f"error log flush failed: {e}")
            return
        if path is not None:
            get_logger().info(f"error log written: {path}")

    def _report(self, result: ImportResult, elapsed_seconds: float) -> None:
        out = get_logger()
        lines = render_result_lines(result)
        if result.succeeded:
            out.info(lines[0])
            for line in lines[1:]:
                out.debug(line)
        else:
            for line in lines:
                out.error(line)
        out.info("Finished importing.")
        log_summary(render_summary_line(result, elapsed_seconds).removeprefix("SUMMARY "))
