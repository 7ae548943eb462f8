from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Protocol

from dotenv import load_dotenv

from ..errors import TransactionError
from ..models.config_models import DatabaseConfig

"""Transaction boundary adapters.

The orchestrator only needs begin / commit / rollback. CursorTransaction drives
them with plain SQL on a DB-API cursor (psycopg2 or sqlite3), NullTransaction is
used when there is no database at all (dry runs, tests).

open_cursor() resolves connection settings in this order:
    1. DATABASE_URL / PGDSN (whole DSN from the environment)
    2. ``database.dsn`` from config/import.yml
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back
       to the matching ``database`` config value
A ``.env`` file, when present, is loaded first and overrides the process env.
"""

__all__ = [
    "Transaction",
    "NullTransaction",
    "CursorTransaction",
    "resolve_dsn",
    "open_cursor",
]

logger = logging.getLogger(__name__)


class Transaction(Protocol):
    """All-or-nothing boundary around one import run."""

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class NullTransaction:
    """No-op boundary. Records which calls were made so callers can inspect them."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def begin(self) -> None:
        self.calls.append("begin")

    def commit(self) -> None:
        self.calls.append("commit")

    def rollback(self) -> None:
        self.calls.append("rollback")


class CursorTransaction:
    """Explicit BEGIN / COMMIT / ROLLBACK on a DB-API cursor.

    The driver must not open transactions implicitly, otherwise the explicit
    BEGIN nests (psycopg2: ``autocommit = True``, sqlite3:
    ``isolation_level=None``).
    """

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    def _execute(self, statement: str) -> None:
        try:
            self.cursor.execute(statement)
        except Exception as e:
            raise TransactionError(f"{statement} failed: {e}") from e

    def begin(self) -> None:
        self._execute("BEGIN")

    def commit(self) -> None:
        self._execute("COMMIT")

    def rollback(self) -> None:
        self._execute("ROLLBACK")


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; a failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        logger.warning("failed to load .env via python-dotenv: %s", e)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Build a libpq DSN from the environment, falling back to config values."""
    dsn_env = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn_env:
        return dsn_env
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def open_cursor(db_cfg: DatabaseConfig, env_file: Path | None = Path(".env")) -> Iterator[Any]:
    """Yield a psycopg2 cursor whose connection leaves transactions to the caller."""
    import psycopg2

    if env_file is not None:
        _load_env_file(env_file, override=True)

    conn = psycopg2.connect(resolve_dsn(db_cfg))
    conn.autocommit = True  # BEGIN/COMMIT は CursorTransaction が明示発行
    cur = conn.cursor()
    try:
        yield cur
    finally:
        try:
            cur.close()
        finally:
            conn.close()
