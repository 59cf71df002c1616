"""Case ingestion entry points.

Flow for one uploaded workbook:
  - read the first sheet into header-keyed rows (FormatError on failure)
  - classify the forum once from filename + sample rows
  - standardize each row into a CaseRecord
  - partition duplicates against the caller's existing-record snapshot
  - audit each new record for missing required fields

Every call is independent: no module-level state is read or written, so
concurrent uploads need no coordination here. Case-ID uniqueness across
concurrent uploads is the persistence layer's job.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .config import IngestConfig
from .duplicate_detector import ExistingRecord, partition_duplicates
from .quality_auditor import QualityReport, audit_records
from .record_standardizer import CaseRecord, standardize_record
from .source_classifier import DEFAULT_SAMPLE_ROWS, Classification, Forum, classify_source, file_priority
from .workbook_reader import read_workbook


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionResult:
    forum: Forum
    classification: Classification
    standardized_rows: Tuple[CaseRecord, ...]
    duplicates: Tuple[CaseRecord, ...]
    new_records: Tuple[CaseRecord, ...]
    quality_reports: Tuple[QualityReport, ...]
    source_file: str = ""

    def summary(self) -> Dict[str, Any]:
        """Processed-file statistics for this upload."""
        return {
            "filename": self.source_file,
            "file_type": self.forum.value,
            "priority": file_priority(self.forum),
            "records_processed": len(self.new_records),
            "duplicates_found": len(self.duplicates),
            "discrepancies_found": sum(1 for r in self.quality_reports if r.has_discrepancies),
        }


def ingest_rows(
    rows: Sequence[Mapping[str, Any]],
    filename: str,
    existing_records: Iterable[ExistingRecord] = (),
    sample_size: int = DEFAULT_SAMPLE_ROWS,
) -> IngestionResult:
    """Normalize already-decoded sheet rows into canonical, deduplicated records."""

    rows = list(rows)
    if not rows:
        logger.warning("No data rows found in %s", filename)

    classification = classify_source(filename, rows, sample_size=sample_size)
    logger.info("Detected %s source for %s (rule: %s)", classification.forum.value, filename, classification.rule)

    standardized = tuple(standardize_record(row, classification.forum) for row in rows)
    partition = partition_duplicates(standardized, existing_records)
    reports = tuple(audit_records(partition.new_records))

    discrepancies = sum(1 for r in reports if r.has_discrepancies)
    logger.info(
        "Standardized %s rows from %s: %s new, %s duplicates, %s with discrepancies",
        len(standardized),
        filename,
        len(partition.new_records),
        len(partition.duplicates),
        discrepancies,
    )
    return IngestionResult(
        forum=classification.forum,
        classification=classification,
        standardized_rows=standardized,
        duplicates=partition.duplicates,
        new_records=partition.new_records,
        quality_reports=reports,
        source_file=filename,
    )


def ingest_workbook(
    buffer: bytes,
    filename: str,
    existing_records: Iterable[ExistingRecord] = (),
    config: Optional[IngestConfig] = None,
) -> IngestionResult:
    """Read a workbook buffer and run it through the normalization pipeline.

    Raises FormatError when the workbook cannot be decoded; nothing else in
    the pipeline is fatal.
    """

    config = config or IngestConfig()
    rows = read_workbook(buffer, filename, config.ingestion.allowed_extensions)
    return ingest_rows(rows, filename, existing_records, sample_size=config.ingestion.sample_rows)
