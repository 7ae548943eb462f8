from __future__ import annotations

from csv_importable.models.import_result import ImportResult, RowOutcome
from csv_importable.services.summary import (
    ROLLBACK_MESSAGE,
    SUCCESS_MESSAGE,
    render_result_lines,
    render_summary_line,
)


def test_summary_line_success():
    result = ImportResult(row_outcomes=[RowOutcome(2), RowOutcome(3)])
    assert render_summary_line(result, 1.5) == (
        "SUMMARY rows=2 success=2 failed=0 status=success elapsed_sec=1.5"
    )


def test_summary_line_failure_and_whole_seconds():
    result = ImportResult(row_outcomes=[RowOutcome(2), RowOutcome(3, errors=["x"])])
    assert render_summary_line(result, 3.0) == (
        "SUMMARY rows=2 success=1 failed=1 status=error elapsed_sec=3"
    )


def test_summary_line_top_level_error():
    line = render_summary_line(ImportResult.failed("boom"), 0)
    assert line == "SUMMARY rows=0 success=0 failed=0 status=error elapsed_sec=0"


def test_summary_line_small_elapsed_not_scientific():
    line = render_summary_line(ImportResult(), 0.000123)
    assert line.endswith("elapsed_sec=0.000123")


def test_result_lines_success():
    result = ImportResult(row_outcomes=[RowOutcome(2), RowOutcome(3)])
    assert render_result_lines(result) == [SUCCESS_MESSAGE, "Line 2: success", "Line 3: success"]


def test_result_lines_row_failures():
    result = ImportResult(
        row_outcomes=[RowOutcome(2), RowOutcome(3, errors=["a is blank", "Invalid integer for column: b"])]
    )
    assert render_result_lines(result) == [
        ROLLBACK_MESSAGE,
        "Line 3: a is blank, Invalid integer for column: b",
    ]


def test_result_lines_top_level_error():
    assert render_result_lines(ImportResult.failed("There is no data to import")) == [
        ROLLBACK_MESSAGE,
        "There is no data to import",
    ]
