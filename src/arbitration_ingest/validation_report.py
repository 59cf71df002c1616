from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable

import pandas as pd

from .pipeline import IngestionResult
from .record_standardizer import CaseRecord
from .schema_dictionary import canonical_fields
from .source_classifier import Forum
from .value_normalizer import parse_amount


RECORD_COLUMNS = ["forum", *canonical_fields()]
# Fields whose absence counts a case as missing data on the dashboard
CRITICAL_FIELDS = ["arbitrator_name", "respondent_name", "filing_date", "disposition"]


def records_to_frame(records: Iterable[CaseRecord]) -> pd.DataFrame:
    rows = [r.to_dict() for r in records]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def summarize_cases(records: Iterable[CaseRecord]) -> Dict[str, Any]:
    """Dashboard statistics over a set of case records.

    Award statistics only consider amounts that parse as numbers.
    """

    df = records_to_frame(records)
    total = int(len(df))
    if total:
        missing = df[CRITICAL_FIELDS].isna().any(axis=1)
        awards = pd.Series([parse_amount(v) for v in df["award_amount"]], dtype="float64").dropna()
    else:
        missing = pd.Series([], dtype=bool)
        awards = pd.Series([], dtype="float64")
    return {
        "total_cases": total,
        "aaa": int((df["forum"] == Forum.AAA.value).sum()),
        "jams": int((df["forum"] == Forum.JAMS.value).sum()),
        "missing_data": int(missing.sum()),
        "total_award_amount": float(awards.sum()) if not awards.empty else 0.0,
        "average_award_amount": float(awards.mean()) if not awards.empty else 0.0,
        "highest_award_amount": float(awards.max()) if not awards.empty else 0.0,
    }


def build_report(result: IngestionResult) -> Dict[str, Any]:
    missing_counts: Dict[str, int] = {}
    for report in result.quality_reports:
        for field in report.missing_fields:
            missing_counts[field] = missing_counts.get(field, 0) + 1
    return {
        "summary": result.summary(),
        "classification": {
            "forum": result.classification.forum.value,
            "rule": result.classification.rule,
            "is_default": result.classification.is_default,
            "trace": [{"rule": o.rule, "matched": o.matched} for o in result.classification.trace],
        },
        "quality": {
            "records_audited": len(result.quality_reports),
            "with_discrepancies": sum(1 for r in result.quality_reports if r.has_discrepancies),
            "missing_field_counts": missing_counts,
        },
        "cases": summarize_cases(result.new_records),
    }


def write_report(report: Dict[str, Any], output_path: str | Path) -> Path:
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    return out


def write_attention_csv(result: IngestionResult, output_path: str | Path) -> Path:
    """Emit CSV of new records with discrepancies plus their missing fields.

    Writes a header-only file when every record is clean.
    """

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    flagged = [
        (record, report)
        for record, report in zip(result.new_records, result.quality_reports)
        if report.has_discrepancies
    ]
    attn = records_to_frame(record for record, _ in flagged)
    attn["missing_fields"] = [";".join(report.missing_fields) for _, report in flagged]
    attn.to_csv(out, index=False, encoding="utf-8-sig")
    return out


def write_outputs(result: IngestionResult, output_dir: str | Path) -> Dict[str, Path]:
    """Write new records, duplicates, attention rows and the JSON report."""

    base = Path(output_dir)
    base.mkdir(parents=True, exist_ok=True)
    paths = {
        "new_records": base / "new_records.csv",
        "duplicates": base / "duplicates.csv",
        "attention_required": base / "attention_required.csv",
        "report": base / "ingestion_report.json",
    }
    records_to_frame(result.new_records).to_csv(paths["new_records"], index=False, encoding="utf-8-sig")
    records_to_frame(result.duplicates).to_csv(paths["duplicates"], index=False, encoding="utf-8-sig")
    write_attention_csv(result, paths["attention_required"])
    write_report(build_report(result), paths["report"])
    return paths
