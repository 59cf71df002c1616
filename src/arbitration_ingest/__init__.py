"""
Arbitration case ingestion: normalize AAA and JAMS spreadsheet exports into
canonical, deduplicated case records with per-record quality audits.
"""

from .errors import FormatError
from .pipeline import IngestionResult, ingest_rows, ingest_workbook
from .source_classifier import Forum

__all__ = ["FormatError", "Forum", "IngestionResult", "ingest_rows", "ingest_workbook"]
