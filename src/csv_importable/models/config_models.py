from __future__ import annotations

from dataclasses import dataclass, field

from ..parsers.type_parser import ColumnSpec, ColumnType

"""Config dataclasses for the CSV importer.

These are the typed domain view of config/import.yml. The loader in
csv_importable.config.loader validates the raw YAML against the JSON schema
and then builds these objects.
"""

__all__ = [
    "ColumnConfig",
    "DatabaseConfig",
    "ImportConfig",
    "DEFAULT_BIG_FILE_THRESHOLD",
]

DEFAULT_BIG_FILE_THRESHOLD = 10


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection fallback used by the psycopg2 adapter.

    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class ColumnConfig:
    """One declared CSV column."""
    name: str  # CSV ヘッダ名
    type: ColumnType
    required: bool = False
    options: tuple[str, ...] = ()  # select 用の許可値
    attribute: str | None = None  # 出力レコードのキー (省略時 name)

    @property
    def output_key(self) -> str:
        return self.attribute or self.name

    def to_spec(self) -> ColumnSpec:
        return ColumnSpec(
            key=self.name,
            column_type=self.type,
            required=self.required,
            options=self.options,
        )


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import."""
    columns: list[ColumnConfig]
    big_file_threshold: int = DEFAULT_BIG_FILE_THRESHOLD
    should_replace: bool = False
    error_log_dir: str | None = None
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    def column_specs(self) -> list[ColumnSpec]:
        return [column.to_spec() for column in self.columns]
