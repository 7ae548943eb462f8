from __future__ import annotations

import time
from pathlib import Path

import pytest
import yaml

from csv_importable.config.loader import parse_config
from csv_importable.document.reader import FileDocumentSource
from csv_importable.services.orchestrator import CSVImporter
from scripts.gen_perf_dataset import COLUMNS, build_config_yaml, create_csv_file, generate_synthetic_data

"""Performance smoke test over a generated dataset.

Small row count, lenient time budget.
"""

ROWS = 2_000


def _importer(path: Path) -> CSVImporter:
    config = parse_config(yaml.safe_load(build_config_yaml()))
    return CSVImporter.from_config(config, source=FileDocumentSource(path), show_progress=False)


def test_generated_data_covers_every_column():
    df = generate_synthetic_data(10)
    assert list(df.columns) == [name for name, _, _ in COLUMNS]
    assert df.shape == (10, len(COLUMNS))


@pytest.mark.perf
def test_valid_dataset_imports_within_budget(tmp_path: Path):
    path = create_csv_file(tmp_path / "perf.csv", ROWS)
    importer = _importer(path)

    start = time.perf_counter()
    result = importer.run()
    elapsed = time.perf_counter() - start

    assert result.succeeded, result.formatted_errors()[:5]
    assert result.number_imported == ROWS
    assert importer.is_large_document()
    assert elapsed < 30, f"import too slow: {elapsed:.3f}s"
    throughput = ROWS / elapsed
    assert throughput > 100


@pytest.mark.perf
def test_invalid_rows_are_all_reported(tmp_path: Path):
    path = create_csv_file(tmp_path / "broken.csv", ROWS, invalid_ratio=0.01)
    result = _importer(path).run()

    assert not result.succeeded
    assert len(result.failed_rows) == ROWS // 100
    assert len(result.row_outcomes) == ROWS
