from __future__ import annotations

import json

import pytest

from csv_importable.errors import RowImportError
from csv_importable.models.import_result import ImportResult
from csv_importable.services.orchestrator import CSVImporter

"""Contract: serialized ImportResult shape consumed by storage / presentation layers.

{status: "success"|"error",
 results: [{row: int, status: "success"|"error", errors: [str], value: any}],
 error: str|null}
"""


class FailOnThree:
    def import_row(self, row, headers):
        if row.row_number == 3:
            raise RowImportError("age is blank")
        return {"n": row.field("n")}


def _run(document: str) -> ImportResult:
    return CSVImporter(FailOnThree(), document=document, show_progress=False).run()


@pytest.mark.parametrize("document", ["n\na\nb\n", "n\na\n", "n\n"])
def test_top_level_keys(document):
    payload = json.loads(_run(document).to_json())
    assert set(payload) == {"status", "results", "error"}
    assert payload["status"] in {"success", "error"}
    assert payload["error"] is None or isinstance(payload["error"], str)


def test_row_entry_keys_and_types():
    payload = _run("n\na\nb\n").to_dict()
    assert payload["status"] == "error"
    assert payload["error"] is None
    for entry in payload["results"]:
        assert set(entry) == {"row", "status", "errors", "value"}
        assert isinstance(entry["row"], int)
        assert isinstance(entry["errors"], list)
        assert all(isinstance(e, str) for e in entry["errors"])
    assert payload["results"][1] == {"row": 3, "status": "error", "errors": ["age is blank"], "value": None}


def test_status_error_iff_errors_present():
    for entry in _run("n\na\nb\nc\n").to_dict()["results"]:
        assert (entry["status"] == "error") == bool(entry["errors"])


def test_top_level_error_has_no_results():
    payload = _run("n\n").to_dict()
    assert payload == {"status": "error", "results": [], "error": "There is no data to import"}
