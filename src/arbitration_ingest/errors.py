from __future__ import annotations


class FormatError(ValueError):
    """Workbook could not be read; the whole import is rejected."""
