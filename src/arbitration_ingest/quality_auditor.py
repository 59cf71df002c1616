from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .record_standardizer import CaseRecord
from .schema_dictionary import required_fields


@dataclass(frozen=True)
class QualityReport:
    has_discrepancies: bool
    missing_fields: Tuple[str, ...]


def audit_record(record: CaseRecord) -> QualityReport:
    """Flag required fields that are None or blank on a record."""

    missing = []
    for field in required_fields():
        value = getattr(record, field, None)
        if value is None or not str(value).strip():
            missing.append(field)
    return QualityReport(has_discrepancies=bool(missing), missing_fields=tuple(missing))


def audit_records(records: Iterable[CaseRecord]) -> List[QualityReport]:
    return [audit_record(r) for r in records]
