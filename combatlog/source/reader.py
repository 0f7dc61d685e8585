from __future__ import annotations

import codecs
import csv
import io
import zipfile
from pathlib import Path

import pandas as pd

from combatlog.errors import SourceError

"""Row source: file bytes -> rows of string cells.

The pipeline itself consumes only decoded rows; this module is the thin
reference source used by the CLI and tests.

- .csv / .txt / .log: decoded with the chosen encoding and split as CSV.
  Narrative rows are ragged (cell count varies per event) so rows are kept as
  plain lists rather than a rectangular frame.
- .xlsx: first sheet read with pandas, every cell as text.

Empty lines are skipped. A UTF-8 byte order mark is stripped.
"""

__all__ = [
    "SPREADSHEET_SUFFIXES",
    "TEXT_SUFFIXES",
    "decode_rows",
    "read_rows",
]

TEXT_SUFFIXES = {".csv", ".txt", ".log"}
SPREADSHEET_SUFFIXES = {".xlsx"}


def _codec_name(encoding: str) -> str:
    try:
        name = codecs.lookup(encoding).name
    except LookupError as e:
        raise SourceError(f"unknown encoding: {encoding}") from e
    # BOM 付き UTF-8 も同じ扱い
    return "utf-8-sig" if name == "utf-8" else name


def decode_rows(data: bytes, encoding: str) -> list[list[str]]:
    """Decode ``data`` and split it into CSV rows, dropping blank lines."""
    codec = _codec_name(encoding)
    try:
        text = data.decode(codec)
    except UnicodeDecodeError as e:
        raise SourceError(f"cannot decode as {encoding}: {e.reason} at byte {e.start}") from e
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        return [row for row in reader if any(cell.strip() for cell in row)]
    except csv.Error as e:
        # 例: field_size_limit を超える巨大セル
        raise SourceError(f"cannot split rows at line {reader.line_num}: {e}") from e


def _read_spreadsheet(path: Path) -> list[list[str]]:
    try:
        df = pd.read_excel(path, header=None, dtype=str, keep_default_na=False)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise SourceError(f"cannot read spreadsheet {path.name}: {e}") from e
    rows: list[list[str]] = []
    for values in df.fillna("").itertuples(index=False, name=None):
        cells = ["" if v is None else str(v) for v in values]
        while cells and not cells[-1]:
            cells.pop()
        if cells:
            rows.append(cells)
    return rows


def read_rows(path: Path, encoding: str = "utf-8") -> list[list[str]]:
    """Read a log file into rows. ``encoding`` is ignored for spreadsheets."""
    if not path.exists():
        raise SourceError(f"file not found: {path}")
    if path.suffix.lower() in SPREADSHEET_SUFFIXES:
        return _read_spreadsheet(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise SourceError(f"cannot read {path.name}: {e}") from e
    return decode_rows(data, encoding)
