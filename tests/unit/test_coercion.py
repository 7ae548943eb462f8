from __future__ import annotations

from datetime import date

import pytest

from csv_importable.errors import InvalidValueError, RequiredFieldError
from csv_importable.models.row import Row
from csv_importable.parsers.coercion import (
    pull_boolean,
    pull_date,
    pull_float,
    pull_integer,
    pull_percent,
    pull_select,
    pull_string,
    pull_us_zip,
    pull_zip,
)


@pytest.fixture()
def row() -> Row:
    return Row(
        row_number=2,
        values={
            "Name": "Alice",
            "age": "31",
            "SCORE": "9.5",
            "active": "y",
            "signed_up": "20240105",
            "discount": "25%",
            "plan": "Free",
            "zip": "501",
            "code": "00501",
            "empty": "",
        },
    )


def test_pull_from_row(row: Row):
    assert pull_string(row, "Name") == "Alice"
    assert pull_integer(row, "age") == 31
    assert pull_float(row, "score") == pytest.approx(9.5)
    assert pull_boolean(row, "active") is True
    assert pull_date(row, "signed_up") == date(2024, 1, 5)
    assert pull_percent(row, "discount") == pytest.approx(0.25)
    assert pull_select(row, "plan", ["free", "pro"]) == "free"
    assert pull_us_zip(row, "zip") == "00501"
    assert pull_zip(row, "code") == "00501"


def test_missing_key_is_blank(row: Row):
    assert pull_integer(row, "nope") is None
    with pytest.raises(RequiredFieldError, match="nope is blank"):
        pull_integer(row, "nope", required=True)


def test_empty_cell_required(row: Row):
    with pytest.raises(RequiredFieldError, match="empty is blank"):
        pull_string(row, "empty", required=True)


def test_explicit_value_overrides_lookup(row: Row):
    assert pull_integer(row, "age", value="7") == 7
    assert pull_string(None, "computed", value="x") == "x"


def test_explicit_none_value_is_blank(row: Row):
    # value=None means "blank", it does not fall back to the row
    assert pull_integer(row, "age", value=None) is None


def test_invalid_value_raises(row: Row):
    with pytest.raises(InvalidValueError, match="Invalid integer for column: Name"):
        pull_integer(row, "Name")
