from __future__ import annotations

from ..models.import_result import ImportResult

"""Rendering of the user-visible import report.

render_result_lines() produces the message lines of a finished run,
render_summary_line() the single machine-greppable SUMMARY line:

    SUMMARY rows={rows} success={success} failed={failed} status={status} elapsed_sec={elapsed}
"""

__all__ = [
    "SUCCESS_MESSAGE",
    "ROLLBACK_MESSAGE",
    "render_result_lines",
    "render_summary_line",
]

SUCCESS_MESSAGE = "Import completed successfully!"
ROLLBACK_MESSAGE = "Import failed, all changes have been rolled back."


def _format_number(value: float) -> str:
    # 整数値は小数点なし、極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_result_lines(result: ImportResult) -> list[str]:
    """Lines shown to the user once a run is over.

    Success: the success message followed by one line per row result.
    Failure: the rollback notice followed by the top-level error if there is
    one, otherwise every failed row ("Line N: ...").
    """
    if result.succeeded:
        lines = [SUCCESS_MESSAGE]
        lines.extend(f"Line {o.row_number}: {o.status.value}" for o in result.row_outcomes)
        return lines
    lines = [ROLLBACK_MESSAGE]
    lines.extend(result.formatted_errors())
    return lines


def render_summary_line(result: ImportResult, elapsed_seconds: float) -> str:
    """Render the SUMMARY line for a finished run."""
    total = len(result.row_outcomes)
    success = result.number_imported
    return (
        f"SUMMARY rows={total} "
        f"success={success} "
        f"failed={total - success} "
        f"status={result.status.value} "
        f"elapsed_sec={_format_number(elapsed_seconds)}"
    )
