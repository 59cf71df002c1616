"""Spreadsheet boundary: turn an uploaded workbook into header-keyed rows.

Only the first sheet is read and its first row is the header. Empty cells
are dropped from each row, so a row mapping only carries headers that hold a
value. Any failure to decode the workbook surfaces as FormatError; partial
results are never returned.
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd

from .errors import FormatError
from .field_extractor import is_missing


DEFAULT_ALLOWED_EXTENSIONS = (".xlsx", ".xlsm", ".xls")


def validate_extension(filename: str, allowed: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS) -> None:
    """Ensure the file extension is allowed."""

    suffix = Path(filename or "").suffix.lower()
    allowed_set = {ext.lower() for ext in allowed}
    if suffix not in allowed_set:
        raise FormatError(f"Unsupported file extension: {suffix or '<none>'}. Allowed: {sorted(allowed_set)}")


def frame_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a sheet frame to row mappings without empty cells; blank rows are skipped."""

    rows: List[Dict[str, Any]] = []
    for record in df.to_dict(orient="records"):
        row = {str(k): v for k, v in record.items() if not is_missing(v)}
        if row:
            rows.append(row)
    return rows


def read_workbook(buffer: bytes, filename: str, allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS) -> List[Dict[str, Any]]:
    """Read the first sheet of a workbook buffer as a list of header-keyed rows."""

    validate_extension(filename, allowed_extensions)
    if not buffer:
        raise FormatError(f"Workbook {filename} is empty")
    try:
        with pd.ExcelFile(BytesIO(buffer)) as xls:
            if not xls.sheet_names:
                raise FormatError(f"Workbook {filename} contains no sheets")
            df = xls.parse(xls.sheet_names[0], dtype=str, keep_default_na=False, na_values=[""])
    except FormatError:
        raise
    except Exception as exc:
        raise FormatError(f"Failed to read Excel file {filename}: {exc}") from exc
    return frame_to_rows(df)
