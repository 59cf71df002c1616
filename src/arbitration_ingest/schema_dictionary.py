"""Canonical case fields and the header aliases seen in AAA and JAMS exports."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class AliasEntry:
    field: str
    aliases: Tuple[str, ...]
    required: bool = False


# Alias order is priority order; compared case-insensitively by the extractor.
STANDARD_FIELDS: Tuple[AliasEntry, ...] = (
    AliasEntry(
        field="case_id",
        aliases=("case_id", "caseid", "case #", "case number", "id", "case_number", "case id", "case.id"),
        required=True,
    ),
    AliasEntry(
        field="arbitrator_name",
        aliases=(
            "arbitrator", "arbitrator name", "arbitratorname", "arbitrator_name",
            "arbitrator_assigned", "arbitrator assigned", "adjudicator", "neutral",
        ),
    ),
    AliasEntry(
        field="respondent_name",
        aliases=(
            "respondent", "respondent name", "respondentname", "respondent_name", "defendant",
            "business", "business name", "business_name", "company", "company name", "nonconsumer",
        ),
    ),
    AliasEntry(
        field="consumer_attorney",
        aliases=(
            "consumer attorney", "consumerattorney", "consumer_attorney", "claimant attorney",
            "claimant_attorney", "name_consumer_attorney", "attorney name", "attorney_name",
        ),
    ),
    AliasEntry(
        field="filing_date",
        aliases=(
            "filing date", "filingdate", "filing_date", "date filed", "date_filed", "date",
            "initiated", "initiated on", "date initiated", "submission date",
        ),
    ),
    AliasEntry(
        field="disposition",
        aliases=(
            "disposition", "outcome", "result", "award_or_outcome", "award or outcome",
            "resolution", "status", "case_status", "case status",
        ),
    ),
    AliasEntry(
        field="claim_amount",
        aliases=(
            "claim amount", "claimamount", "claim_amount", "claim", "amount claimed",
            "amount_claimed", "disputed amount", "amount in dispute",
        ),
    ),
    AliasEntry(
        field="award_amount",
        aliases=(
            "award", "award amount", "awardamount", "award_amount", "amount", "consumer award",
            "award total", "total award", "monetary relief",
        ),
    ),
)

_BY_FIELD: Dict[str, AliasEntry] = {entry.field: entry for entry in STANDARD_FIELDS}


def aliases_for(field: str) -> Tuple[str, ...]:
    """Return the ordered aliases for a canonical field.

    Raises KeyError for a field that is not in the dictionary.
    """

    return _BY_FIELD[field].aliases


def canonical_fields() -> Tuple[str, ...]:
    return tuple(entry.field for entry in STANDARD_FIELDS)


def required_fields() -> Tuple[str, ...]:
    return tuple(entry.field for entry in STANDARD_FIELDS if entry.required)
