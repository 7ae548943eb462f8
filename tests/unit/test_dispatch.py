from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

from csv_importable.document.reader import FileDocumentSource
from csv_importable.models.import_result import ImportResult
from csv_importable.services.dispatch import ImportJob, Scheduler, dispatch_import
from csv_importable.services.orchestrator import CSVImporter, ExecutionMode


class Echo:
    def import_row(self, row, headers):
        return row.row_number


class QueueScheduler:
    def __init__(self) -> None:
        self.tasks: list = []

    def schedule(self, task) -> None:
        self.tasks.append(task)


def _csv(rows: int) -> str:
    return "n\n" + "".join(f"{i}\n" for i in range(rows))


def test_queue_scheduler_matches_protocol():
    assert isinstance(QueueScheduler(), Scheduler)


def test_small_document_runs_immediately():
    scheduler = QueueScheduler()
    on_complete = Mock()
    importer = CSVImporter(Echo(), document=_csv(10), show_progress=False)

    mode = dispatch_import(importer, scheduler, on_complete)

    assert mode is ExecutionMode.IMMEDIATE
    assert scheduler.tasks == []
    result = on_complete.call_args.args[0]
    assert isinstance(result, ImportResult)
    assert result.values == list(range(2, 12))


def test_large_document_is_scheduled(capsys):
    scheduler = QueueScheduler()
    on_complete = Mock()
    importer = CSVImporter(Echo(), document=_csv(11), show_progress=False, document_name="big.csv")

    mode = dispatch_import(importer, scheduler, on_complete)

    assert mode is ExecutionMode.DEFERRED
    on_complete.assert_not_called()
    assert importer.results is None
    assert "INFO big.csv: more than 10 rows, import scheduled" in capsys.readouterr().out

    (job,) = scheduler.tasks
    assert isinstance(job, ImportJob)
    job()
    on_complete.assert_called_once()
    assert on_complete.call_args.args[0].number_imported == 11


def test_unparseable_document_runs_immediately_and_reports_error():
    on_complete = Mock()
    importer = CSVImporter(Echo(), document="n\n", show_progress=False)

    mode = dispatch_import(importer, QueueScheduler(), on_complete)

    assert mode is ExecutionMode.IMMEDIATE
    assert on_complete.call_args.args[0].error == "There is no data to import"


class FieldValue:
    def import_row(self, row, headers):
        return row.field("n")


def _write_rows(path: Path, value: str, rows: int) -> None:
    path.write_text("n\n" + f"{value}\n" * rows, encoding="utf-8")


def test_deferred_job_reads_source_when_it_runs(tmp_path: Path):
    path = tmp_path / "people.csv"
    _write_rows(path, "old", 11)
    scheduler = QueueScheduler()
    on_complete = Mock()
    importer = CSVImporter(FieldValue(), source=FileDocumentSource(path), show_progress=False)

    assert dispatch_import(importer, scheduler, on_complete) is ExecutionMode.DEFERRED
    assert importer._parsed is None

    _write_rows(path, "new", 12)
    (job,) = scheduler.tasks
    job()

    result = on_complete.call_args.args[0]
    assert result.number_imported == 12
    assert set(result.values) == {"new"}


def test_missing_source_runs_immediately_and_reports_error(tmp_path: Path):
    on_complete = Mock()
    importer = CSVImporter(
        Echo(), source=FileDocumentSource(tmp_path / "gone.csv"), show_progress=False, document_name="gone.csv"
    )

    mode = dispatch_import(importer, QueueScheduler(), on_complete)

    assert mode is ExecutionMode.IMMEDIATE
    assert on_complete.call_args.args[0].error.startswith("could not read document gone.csv")
