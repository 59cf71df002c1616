from __future__ import annotations

import re
from typing import Optional

import numpy as np
import pandas as pd


AMOUNT_STRIP_RX = re.compile(r"[^0-9.\-]+")
RELATIVE_DATE_WORDS = frozenset({"now", "today", "tomorrow", "yesterday"})
# A four-digit year, or a numeric d/m/yy style date.
DATE_YEAR_RX = re.compile(r"\d{4}|\b\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2}\b")


def normalize_text(x: Optional[str]) -> Optional[str]:
    """Trim surrounding whitespace; blank strings collapse to None. Casing is preserved."""

    if x is None:
        return None
    s = str(x).strip()
    return s or None


def _safe_to_float(text: str) -> Optional[float]:
    try:
        val = float(text)
    except (TypeError, ValueError):
        return None
    if not np.isfinite(val):
        return None
    return val


def parse_filing_date(x: Optional[str]) -> Optional[str]:
    """Return the ISO-8601 form of a parseable date, else the input unchanged.

    Text without a year ("15", "March 5") and relative words ("today") are
    kept as-is; pandas would otherwise fill them from the current clock.
    """

    if x is None:
        return None
    text = str(x).strip()
    if text.lower() in RELATIVE_DATE_WORDS or not DATE_YEAR_RX.search(text):
        return x
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return x
    if ts is None or pd.isna(ts):
        return x
    return ts.isoformat()


def clean_award_amount(x: Optional[str]) -> Optional[str]:
    """Strip currency symbols and separators from an award amount.

    "$1,200.00" -> "1200.00". When the stripped text is not a finite number
    the original value is returned untouched ("N/A" stays "N/A"), never a
    partially cleaned fragment.
    """

    if x is None:
        return None
    stripped = AMOUNT_STRIP_RX.sub("", str(x))
    if _safe_to_float(stripped) is None:
        return x
    return stripped


def parse_amount(x: Optional[str]) -> Optional[float]:
    """Numeric value of a stored amount, or None when it is not a number."""

    if x is None:
        return None
    return _safe_to_float(str(x).strip())
