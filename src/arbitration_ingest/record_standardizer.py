from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .field_extractor import extract_field
from .schema_dictionary import STANDARD_FIELDS
from .source_classifier import Forum
from .value_normalizer import clean_award_amount, normalize_text, parse_filing_date


@dataclass(frozen=True)
class CaseRecord:
    forum: Forum
    case_id: Optional[str] = None
    arbitrator_name: Optional[str] = None
    respondent_name: Optional[str] = None
    consumer_attorney: Optional[str] = None
    filing_date: Optional[str] = None
    disposition: Optional[str] = None
    claim_amount: Optional[str] = None
    award_amount: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["forum"] = Forum(self.forum).value
        return data


# Per-field transforms run before trimming; fields not listed are only trimmed.
FIELD_TRANSFORMS: Dict[str, Callable[[Optional[str]], Optional[str]]] = {
    "filing_date": parse_filing_date,
    "award_amount": clean_award_amount,
}


def standardize_record(row: Mapping[str, Any], forum: Forum) -> CaseRecord:
    """Build a canonical case record from one raw sheet row.

    Every dictionary field is extracted by alias, passed through its field
    transform when it has one, then trimmed. Missing or blank values become
    None; nothing here raises on bad cell content.
    """

    values: Dict[str, Optional[str]] = {}
    for entry in STANDARD_FIELDS:
        value = extract_field(row, entry.aliases)
        transform = FIELD_TRANSFORMS.get(entry.field)
        if transform is not None:
            value = transform(value)
        values[entry.field] = normalize_text(value)
    return CaseRecord(forum=Forum(forum), **values)
