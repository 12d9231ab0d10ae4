from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd

from ..errors import ParseError

"""Spreadsheet reader for candidate uploads.

- Only the first sheet of the workbook is read; other sheets are ignored.
- The first non-blank row is the header row, every following row is a data row.
  Blank rows above it and blank columns left of the table are not part of the
  sheet (same as the worksheet's used range).
- Blank cells are left out of the row mapping, fully blank rows are skipped.
- Strings such as "NA" or "null" are kept as-is (pandas NA coercion is off).

Anything that prevents the workbook from being opened or decoded surfaces as
ParseError; callers turn it into a user-facing message.
"""

__all__ = [
    "ACCEPTED_EXTENSIONS",
    "SheetData",
    "cell_text",
    "is_blank",
    "read_spreadsheet",
    "normalize_sheet",
]

ACCEPTED_EXTENSIONS = (".xlsx", ".xls")
EMPTY_HEADER = "__EMPTY"

SpreadsheetSource = str | Path | bytes | BinaryIO


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # header -> cell value, blank cells omitted


def is_blank(value: Any) -> bool:
    """True for missing cells and whitespace-only strings."""
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Render a cell value as text.

    Spreadsheets store phone numbers as floats, so integral floats are written
    without the trailing ".0" (9876543210.0 -> "9876543210").
    """
    if is_blank(value):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _make_columns(header_cells: list[Any]) -> list[str]:
    """Build unique column names from the header row.

    Blank headers become __EMPTY, repeated names get _1, _2, ... suffixes so
    that no column is silently overwritten in the row mapping.
    """
    columns: list[str] = []
    next_suffix: dict[str, int] = {}
    for cell in header_cells:
        base = EMPTY_HEADER if is_blank(cell) else cell_text(cell)
        name = base
        if base in next_suffix:
            n = next_suffix[base]
            name = f"{base}_{n}"
            while name in next_suffix:
                n += 1
                name = f"{base}_{n}"
            next_suffix[base] = n + 1
        next_suffix.setdefault(name, 1)
        columns.append(name)
    return columns


def _as_excel_source(source: SpreadsheetSource) -> Any:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    return source


def read_spreadsheet(source: SpreadsheetSource) -> SheetData:
    """Read the first sheet of a workbook into header-keyed rows.

    Parameters
    ----------
    source: path to an .xlsx/.xls file, its raw bytes, or a binary file object

    Raises
    ------
    ParseError: the file is missing or is not a recognized spreadsheet
    """
    if isinstance(source, (str, Path)) and not Path(source).exists():
        raise ParseError(f"file not found: {source}")
    try:
        with pd.ExcelFile(_as_excel_source(source)) as xls:
            if not xls.sheet_names:
                raise ParseError("workbook has no sheets")
            sheet_name = str(xls.sheet_names[0])
            # Header applied manually so duplicate and blank headers can be named
            df = xls.parse(xls.sheet_names[0], header=None, dtype=object, keep_default_na=False)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"could not read spreadsheet: {e}") from e
    return normalize_sheet(df, sheet_name)


def _used_range(df: pd.DataFrame) -> pd.DataFrame:
    """Drop blank rows above the table and all-blank columns left of it."""
    first_row = next(
        (i for i, raw in enumerate(df.itertuples(index=False, name=None))
         if not all(is_blank(v) for v in raw)),
        None,
    )
    if first_row is None:
        return df.iloc[0:0, 0:0]
    first_col = next(j for j in range(df.shape[1]) if not df.iloc[:, j].map(is_blank).all())
    return df.iloc[first_row:, first_col:]


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Turn a raw (header=None) DataFrame into SheetData using its first non-blank row as header."""
    df = _used_range(df)
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])
    columns = _make_columns(df.iloc[0].tolist())
    rows: list[dict[str, Any]] = []
    for raw in df.iloc[1:].itertuples(index=False, name=None):
        row: dict[str, Any] = {}
        for col, val in zip(columns, raw, strict=False):
            if is_blank(val):
                continue
            row[col] = val
        if not row:
            continue
        rows.append(row)
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)
