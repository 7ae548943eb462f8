from __future__ import annotations

from unittest.mock import Mock

import pytest

from csv_importable.errors import RowImportError
from csv_importable.models.config_models import ColumnConfig, ImportConfig
from csv_importable.models.row import Row
from csv_importable.parsers.type_parser import ColumnType
from csv_importable.services.row_importer import RowImporter, SchemaRowImporter

COLUMNS = [
    ColumnConfig(name="email", type=ColumnType.STRING, required=True),
    ColumnConfig(name="age", type=ColumnType.INTEGER),
    ColumnConfig(name="postal_code", type=ColumnType.US_ZIP, attribute="zip"),
]


def test_schema_row_importer_is_a_row_importer():
    assert isinstance(SchemaRowImporter(COLUMNS), RowImporter)


def test_requires_columns():
    with pytest.raises(ValueError):
        SchemaRowImporter([])


def test_builds_record_with_attribute_keys():
    importer = SchemaRowImporter(COLUMNS)
    row = Row(row_number=2, values={"email": "a@example.com", "age": "31", "postal_code": "501"})
    assert importer.import_row(row, ["email", "age", "postal_code"]) == {
        "email": "a@example.com",
        "age": 31,
        "zip": "00501",
    }


def test_collects_all_column_errors():
    importer = SchemaRowImporter(COLUMNS)
    row = Row(row_number=3, values={"email": "", "age": "x", "postal_code": "12a45"})
    with pytest.raises(RowImportError) as exc_info:
        importer.import_row(row, [])
    assert str(exc_info.value) == (
        "email is blank, "
        "Invalid integer for column: age, "
        "Invalid value for column: postal_code. Value should contain only numbers or a dash."
    )


def test_sink_receives_record_and_return_value_wins():
    sink = Mock(return_value=17)
    importer = SchemaRowImporter(COLUMNS, sink=sink)
    row = Row(row_number=2, values={"email": "a@example.com"})
    assert importer.import_row(row, []) == 17
    sink.assert_called_once_with({"email": "a@example.com", "age": None, "zip": None})


def test_sink_returning_none_keeps_record():
    importer = SchemaRowImporter(COLUMNS, sink=lambda record: None)
    row = Row(row_number=2, values={"email": "a@example.com"})
    assert importer.import_row(row, [])["email"] == "a@example.com"


def test_sink_not_called_for_invalid_row():
    sink = Mock()
    importer = SchemaRowImporter(COLUMNS, sink=sink)
    with pytest.raises(RowImportError):
        importer.import_row(Row(row_number=2, values={}), [])
    sink.assert_not_called()


def test_from_config():
    config = ImportConfig(columns=COLUMNS[:1])
    importer = SchemaRowImporter.from_config(config)
    assert importer.columns == COLUMNS[:1]
