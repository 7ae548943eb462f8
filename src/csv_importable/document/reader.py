from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import pandas as pd

from ..errors import DocumentParseError, EmptyDocumentError
from ..models.row import ParsedDocument, Row

"""CSV document reader.

Line 1 is the header, every following non-blank line is a data row. All cells
are read as text (no dtype inference, no NA-string conversion) so the type
parsers see exactly what the file contains. Cells missing from a short row
come back as None.

Header handling: blank header cells are dropped and repeated names keep only
their first column.
"""

__all__ = [
    "DocumentSource",
    "FileDocumentSource",
    "read_csv_text",
    "normalize_document",
    "parse_document",
]


class DocumentSource(Protocol):
    """Anything that can hand over the raw CSV payload (blob store, upload, file)."""

    def read_document(self) -> str | bytes: ...


@dataclass(frozen=True)
class FileDocumentSource:
    """Reads the document from a local file each time it is asked."""
    path: Path
    encoding: str = "utf-8"

    def read_document(self) -> str:
        return Path(self.path).read_text(encoding=self.encoding)


def read_csv_text(text: str | bytes) -> pd.DataFrame:
    """Read raw CSV text into a DataFrame without treating any row as header."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"could not decode CSV as UTF-8: {e}") from e
    text = text.lstrip("\ufeff")  # BOM 除去
    try:
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as e:
        raise EmptyDocumentError() from e
    except (pd.errors.ParserError, ValueError) as e:
        raise DocumentParseError(f"could not parse CSV: {e}") from e


def _cell(value: object) -> str | None:
    if pd.isna(value):
        return None
    return str(value)


def normalize_document(df: pd.DataFrame) -> ParsedDocument:
    """Split a raw DataFrame into compacted headers and Row objects.

    Raises EmptyDocumentError when there is no header or no data row.
    """
    if df.shape[0] < 1:
        raise EmptyDocumentError()

    header_cells = [(_cell(c) or "").strip() for c in df.iloc[0].tolist()]
    headers: list[str] = []
    for name in header_cells:
        if name and name not in headers:
            headers.append(name)

    data_part = df.iloc[1:]
    if data_part.shape[0] == 0:
        raise EmptyDocumentError()

    rows: list[Row] = []
    # ヘッダ = 1 行目なので最初のデータ行は 2
    for row_number, raw in enumerate(data_part.itertuples(index=False, name=None), start=2):
        values: dict[str, str | None] = {}
        for name, cell in zip(header_cells, raw, strict=False):
            if not name or name in values:
                continue
            values[name] = _cell(cell)
        rows.append(Row(row_number=row_number, values=values))

    return ParsedDocument(headers=headers, rows=rows)


def parse_document(text: str | bytes) -> ParsedDocument:
    """Parse raw CSV text into headers + rows."""
    return normalize_document(read_csv_text(text))
