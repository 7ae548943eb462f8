# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from csv_importable.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logger() -> Iterator[None]:
    # ハンドラは setup 時の sys.stdout を掴むので、テストごとに作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """big_file_threshold: 10
should_replace: false
error_log_dir: ./logs
columns:
  - name: email
    type: string
    required: true
  - name: age
    type: integer
  - name: active
    type: boolean
    required: true
  - name: plan
    type: select
    options: [free, pro]
  - name: postal_code
    type: us_zip
    attribute: zip
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def valid_csv() -> str:
    return (
        "email,age,active,plan,postal_code\n"
        "alice@example.com,31,yes,free,12345\n"
        "bob@example.com,42,No,Pro,123\n"
        "carol@example.com,,TRUE,,123456789\n"
    )


@pytest.fixture()
def mixed_csv() -> str:
    # rows 2 and 4 are invalid, rows 3 and 5 are valid
    return (
        "email,age,active\n"
        ",20,yes\n"
        "bob@example.com,42,no\n"
        "carol@example.com,old,maybe\n"
        "dave@example.com,18,y\n"
    )
