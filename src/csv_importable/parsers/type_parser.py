from __future__ import annotations

import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import InvalidValueError, OutOfRangeError, RequiredFieldError

if TYPE_CHECKING:
    from ..models.row import Row

"""Column type coercion.

Every column type shares one contract (TypeParser.parse):

- blank value (None, "" or whitespace only): RequiredFieldError when the column
  is required, otherwise None
- present value: the type's coercion routine runs; whatever it raises is
  re-raised as InvalidValueError (OutOfRangeError for range violations), so
  callers only ever see the csv_importable error types
- a coercion routine that returns None is treated as invalid as well

Coercion routines are selected from _COERCERS by ColumnType. Adding a member to
ColumnType without a routine is caught by the unit tests.
"""

__all__ = [
    "ColumnType",
    "ColumnSpec",
    "TypeParser",
    "parse_value",
    "is_blank",
]


class ColumnType(Enum):
    """Closed set of supported column types."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    PERCENT = "percent"
    SELECT = "select"
    US_ZIP = "us_zip"
    ZIP = "zip"

    @property
    def type_name(self) -> str:
        """Name used in user-facing error messages."""
        return _TYPE_NAMES[self]


_TYPE_NAMES: dict[ColumnType, str] = {
    ColumnType.STRING: "string",
    ColumnType.INTEGER: "integer",
    ColumnType.FLOAT: "decimal",
    ColumnType.BOOLEAN: "boolean",
    ColumnType.DATE: "date",
    ColumnType.PERCENT: "percent",
    ColumnType.SELECT: "value",
    ColumnType.US_ZIP: "US zip code",
    ColumnType.ZIP: "zip code",
}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DATE_RE = re.compile(r"[0-9]{8}")
_DIGITS_RE = re.compile(r"[0-9]+")

_TRUE_VALUES = frozenset({"yes", "y", "true"})
_FALSE_VALUES = frozenset({"no", "n", "false"})


class _OutOfRange(ValueError):
    """Internal signal: the value parsed but is outside the permitted range."""


def is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _coerce_string(value: str, options: Sequence[str]) -> str:
    return value


def _coerce_integer(value: str, options: Sequence[str]) -> int:
    text = value.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"not a base-10 integer: {value!r}")
    return int(text, 10)


def _coerce_float(value: str, options: Sequence[str]) -> float:
    number = float(value.strip())
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def _coerce_boolean(value: str, options: Sequence[str]) -> bool | None:
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None  # parse() が不正値として扱う


def _coerce_date(value: str, options: Sequence[str]) -> date:
    text = value.strip()
    if not _DATE_RE.fullmatch(text):
        raise ValueError(f"expected YYYYMMDD: {value!r}")
    year, month, day = int(text[0:4]), int(text[4:6]), int(text[6:8])
    return date(year, month, day)


def _coerce_percent(value: str, options: Sequence[str]) -> float:
    text = value.strip()
    if "%" in text:
        number = float(text.replace("%", "")) / 100.0
    else:
        number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    if number < 0 or number > 1:
        raise _OutOfRange(number)
    return number


def _coerce_select(value: str, options: Sequence[str]) -> str:
    text = value.strip().lower()
    allowed = {str(option).lower() for option in options}
    if text not in allowed:
        raise ValueError(f"{value!r} not in {sorted(allowed)}")
    return text


def _coerce_us_zip(value: str, options: Sequence[str]) -> str:
    digits = value.strip().replace("-", "")
    if not _DIGITS_RE.fullmatch(digits):
        raise ValueError(f"not a zip code: {value!r}")
    if len(digits) == 9:
        # ZIP+4 は入力そのまま (ハイフン込み) を返す
        return value
    return digits.rjust(5, "0")


def _coerce_zip(value: str, options: Sequence[str]) -> str:
    digits = value.strip()
    if not _DIGITS_RE.fullmatch(digits):
        raise ValueError(f"not a zip code: {value!r}")
    return digits.rjust(5, "0")


_COERCERS: dict[ColumnType, Callable[[str, Sequence[str]], Any]] = {
    ColumnType.STRING: _coerce_string,
    ColumnType.INTEGER: _coerce_integer,
    ColumnType.FLOAT: _coerce_float,
    ColumnType.BOOLEAN: _coerce_boolean,
    ColumnType.DATE: _coerce_date,
    ColumnType.PERCENT: _coerce_percent,
    ColumnType.SELECT: _coerce_select,
    ColumnType.US_ZIP: _coerce_us_zip,
    ColumnType.ZIP: _coerce_zip,
}


def _invalid_message(column_type: ColumnType, key: str, options: Sequence[str]) -> str:
    if column_type is ColumnType.PERCENT:
        return f"Invalid percent for column: {key}. It should be a number or a percentage such as 50%."
    if column_type is ColumnType.SELECT:
        return f"Invalid value for column: {key}. Must be one of the following: {', '.join(options)}"
    if column_type is ColumnType.US_ZIP:
        return f"Invalid value for column: {key}. Value should contain only numbers or a dash."
    if column_type is ColumnType.ZIP:
        return f"Invalid value for column: {key}. Value should contain only numbers."
    return f"Invalid {column_type.type_name} for column: {key}"


@dataclass(frozen=True)
class TypeParser:
    """One coercion attempt for one (column, row) cell.

    Build it right before calling parse() and throw it away afterwards.
    raw_value is the cell text looked up from the row, or a value supplied
    explicitly by the caller.
    """
    column_type: ColumnType
    key: str
    raw_value: str | None
    required: bool = False
    options: tuple[str, ...] = ()

    @classmethod
    def from_row(
        cls,
        column_type: ColumnType,
        key: str,
        row: Row | None,
        *,
        required: bool = False,
        options: Sequence[str] = (),
    ) -> TypeParser:
        raw = row.field(key) if row is not None else None
        return cls(column_type, key, raw, required=required, options=tuple(options))

    def parse(self) -> Any:
        if is_blank(self.raw_value):
            if self.required:
                raise RequiredFieldError(self.key)
            return None

        coerce = _COERCERS[self.column_type]
        try:
            parsed = coerce(self.raw_value, self.options)
        except _OutOfRange as e:
            raise OutOfRangeError(
                self.key,
                self.column_type.type_name,
                self.raw_value,
                message=f"Invalid percent for column: {self.key}. It should be a decimal between 0 and 1.",
            ) from e
        except Exception as e:
            raise InvalidValueError(
                self.key,
                self.column_type.type_name,
                self.raw_value,
                message=_invalid_message(self.column_type, self.key, self.options),
            ) from e

        if parsed is None:
            raise InvalidValueError(
                self.key,
                self.column_type.type_name,
                self.raw_value,
                message=_invalid_message(self.column_type, self.key, self.options),
            )
        return parsed


@dataclass(frozen=True)
class ColumnSpec:
    """Reusable column declaration (no cell value attached)."""
    key: str
    column_type: ColumnType
    required: bool = False
    options: tuple[str, ...] = ()

    def parser_for(self, row: Row | None) -> TypeParser:
        return TypeParser.from_row(
            self.column_type, self.key, row, required=self.required, options=self.options
        )

    def parse_row(self, row: Row) -> Any:
        return self.parser_for(row).parse()


def parse_value(
    column_type: ColumnType,
    key: str,
    raw_value: str | None,
    *,
    required: bool = False,
    options: Sequence[str] = (),
) -> Any:
    """Coerce a single raw value. Shorthand for TypeParser(...).parse()."""
    return TypeParser(column_type, key, raw_value, required=required, options=tuple(options)).parse()
