from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..logging.init import get_logger
from ..models.import_result import ImportResult
from .orchestrator import CSVImporter, ExecutionMode

"""Choosing between an immediate and a deferred run.

Small documents are imported right away; documents with more data rows than
the importer's big_file_threshold are handed to a Scheduler as an ImportJob.
The job runs the same importer later and passes its result to on_complete,
which is where a caller persists results and status for the stored import.
"""

__all__ = [
    "Scheduler",
    "ImportJob",
    "dispatch_import",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Anything that can run a zero-argument task later (queue, thread pool, ...)."""

    def schedule(self, task: Callable[[], None]) -> None: ...


@dataclass
class ImportJob:
    """Deferred unit of work: run the importer, then report the result."""
    importer: CSVImporter
    on_complete: Callable[[ImportResult], None]

    def __call__(self) -> None:
        result = self.importer.run()
        self.on_complete(result)


def dispatch_import(
    importer: CSVImporter,
    scheduler: Scheduler,
    on_complete: Callable[[ImportResult], None],
) -> ExecutionMode:
    """Run now or schedule, depending on document size.

    Returns the chosen mode. In IMMEDIATE mode on_complete has already been
    called when this returns; in DEFERRED mode it is called by the job.
    """
    mode = importer.execution_mode()
    if mode is ExecutionMode.DEFERRED:
        get_logger().info(
            f"{importer.document_name}: more than {importer.big_file_threshold} rows, import scheduled"
        )
        scheduler.schedule(ImportJob(importer=importer, on_complete=on_complete))
        return mode

    logger.debug("document=%s running immediately", importer.document_name)
    on_complete(importer.run())
    return mode
