from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

import pandas as pd


def is_missing(value: Any) -> bool:
    """Return True for empty cells: None, NaN, NaT and pandas NA."""

    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Containers make pd.isna return an array
        return False


def stringify(value: Any) -> str:
    """Render a cell value as text.

    Integral floats drop the trailing ``.0`` that Excel numeric cells carry,
    and timestamps render in ISO form.
    """

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    return str(value)


def extract_field(row: Mapping[str, Any], aliases: Sequence[str]) -> Optional[str]:
    """Resolve a field value from a raw row using ordered header aliases.

    Resolution order:
      1) Exact header match, aliases in priority order
      2) Case-insensitive header match, aliases in priority order
    An exact match on any alias wins over a case-insensitive match on a
    higher-priority alias. Empty cells are treated as absent. Returns None
    when nothing matches.
    """

    for alias in aliases:
        if alias in row and not is_missing(row[alias]):
            return stringify(row[alias])

    lowered = [(str(key).lower(), key) for key in row.keys()]
    for alias in aliases:
        target = alias.lower()
        for low, key in lowered:
            if low == target and not is_missing(row[key]):
                return stringify(row[key])
    return None
