from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING, Any

from .type_parser import ColumnType, TypeParser

if TYPE_CHECKING:
    from ..models.row import Row

"""Cell pulling helpers for row importers.

Each pull_<type>(row, key) looks ``key`` up in the row (exact, upper, lower
case) and coerces it. Passing ``value=`` skips the lookup and coerces the given
text instead, which is handy for derived or concatenated cells.
"""

__all__ = [
    "pull",
    "pull_string",
    "pull_integer",
    "pull_float",
    "pull_boolean",
    "pull_date",
    "pull_percent",
    "pull_select",
    "pull_us_zip",
    "pull_zip",
]


class _Unset:
    def __repr__(self) -> str:  # pragma: no cover (trivial)
        return "<unset>"


_UNSET: Any = _Unset()


def pull(
    column_type: ColumnType,
    row: Row | None,
    key: str,
    *,
    required: bool = False,
    value: str | None = _UNSET,
    options: Sequence[str] = (),
) -> Any:
    if value is _UNSET:
        parser = TypeParser.from_row(column_type, key, row, required=required, options=options)
    else:
        parser = TypeParser(column_type, key, value, required=required, options=tuple(options))
    return parser.parse()


def pull_string(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> str | None:
    return pull(ColumnType.STRING, row, key, required=required, value=value)


def pull_integer(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> int | None:
    return pull(ColumnType.INTEGER, row, key, required=required, value=value)


def pull_float(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> float | None:
    return pull(ColumnType.FLOAT, row, key, required=required, value=value)


def pull_boolean(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> bool | None:
    return pull(ColumnType.BOOLEAN, row, key, required=required, value=value)


def pull_date(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> date | None:
    return pull(ColumnType.DATE, row, key, required=required, value=value)


def pull_percent(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> float | None:
    return pull(ColumnType.PERCENT, row, key, required=required, value=value)


def pull_select(
    row: Row | None,
    key: str,
    options: Sequence[str],
    *,
    required: bool = False,
    value: str | None = _UNSET,
) -> str | None:
    return pull(ColumnType.SELECT, row, key, required=required, value=value, options=options)


def pull_us_zip(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> str | None:
    return pull(ColumnType.US_ZIP, row, key, required=required, value=value)


def pull_zip(row: Row | None, key: str, *, required: bool = False, value: str | None = _UNSET) -> str | None:
    return pull(ColumnType.ZIP, row, key, required=required, value=value)
