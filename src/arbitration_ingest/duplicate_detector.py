from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple, Union

from .field_extractor import extract_field
from .record_standardizer import CaseRecord


ExistingRecord = Union[CaseRecord, Mapping[str, Any]]

# Stored rows carry a serial `id` next to the case ID; only these keys are read.
STORED_CASE_ID_KEYS = ("case_id", "caseId")


@dataclass(frozen=True)
class DuplicatePartition:
    duplicates: Tuple[CaseRecord, ...]
    new_records: Tuple[CaseRecord, ...]


def record_case_id(record: ExistingRecord) -> Optional[str]:
    """Case ID of a standardized record or a stored-case mapping.

    Mappings are matched on `case_id` or `caseId` (any casing), never on
    the broader header aliases such as `id`.
    """

    if isinstance(record, CaseRecord):
        return record.case_id
    return extract_field(record, STORED_CASE_ID_KEYS)


def build_case_index(existing_records: Iterable[ExistingRecord]) -> FrozenSet[str]:
    """Lower-cased case IDs of the existing-store snapshot."""

    index = set()
    for record in existing_records or ():
        case_id = record_case_id(record)
        if case_id is not None:
            index.add(case_id.lower())
    return frozenset(index)


def partition_duplicates(records: Sequence[CaseRecord], existing_records: Iterable[ExistingRecord]) -> DuplicatePartition:
    """Split standardized records into duplicates of stored cases and new records.

    Matching is exact on the lower-cased case ID. Records without a case ID
    are always new. Input order is kept in both partitions.
    """

    index = build_case_index(existing_records)
    duplicates = []
    new_records = []
    for record in records:
        case_id = record_case_id(record)
        if case_id and case_id.lower() in index:
            duplicates.append(record)
        else:
            new_records.append(record)
    return DuplicatePartition(duplicates=tuple(duplicates), new_records=tuple(new_records))
