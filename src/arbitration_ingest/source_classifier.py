"""Forum source detection for uploaded case workbooks.

Detection is a fixed decision table evaluated top to bottom; the first rule
that matches decides the forum. Filename hints come first, then header
signatures, then a REFNO value probe, and finally a JAMS default. The
result carries the name of the deciding rule plus a trace of every rule
that was evaluated, so callers can log or display why a file was routed.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence, Set, Tuple

from .field_extractor import is_missing


class Forum(str, Enum):
    AAA = "AAA"
    JAMS = "JAMS"


AAA_FILENAME_TOKENS = ("aaa", "american arbitration")
JAMS_FILENAME_TOKENS = ("jams",)
AAA_HEADER_TOKENS = frozenset({"NONCONSUMER", "NAME_CONSUMER_ATTORNEY"})
JAMS_HEADER_INDICATORS = (
    "REFNO",
    "ARBITRATOR NAME",
    "CONSUMER ATTORNEY",
    "RESULT",
    "CLAIM AMOUNT",
    "AWARD AMOUNT",
)
JAMS_NAME_TOKENS = ("JAMS", "JUDICIAL ARBITRATION")
REFNO_KEYS = ("REFNO", "Refno", "refno")
DEFAULT_SAMPLE_ROWS = 3
DEFAULT_FORUM = Forum.JAMS

LINE_BREAK_RX = re.compile(r"\r?\n")

FILE_PRIORITY = {Forum.AAA: 1, Forum.JAMS: 2}


@dataclass(frozen=True)
class ClassificationContext:
    filename: str
    sample_rows: Tuple[Mapping[str, Any], ...]
    headers: Tuple[str, ...]
    normalized_headers: frozenset


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: Callable[[ClassificationContext], bool]
    forum: Forum


@dataclass(frozen=True)
class RuleOutcome:
    rule: str
    matched: bool


@dataclass(frozen=True)
class Classification:
    forum: Forum
    rule: str
    trace: Tuple[RuleOutcome, ...]

    @property
    def is_default(self) -> bool:
        return self.rule == "default"


def normalize_header(header: Any) -> str:
    return LINE_BREAK_RX.sub(" ", str(header)).upper().strip()


def build_context(filename: str, sample_rows: Optional[Sequence[Mapping[str, Any]]], sample_size: int = DEFAULT_SAMPLE_ROWS) -> ClassificationContext:
    rows = tuple(r for r in list(sample_rows or [])[:sample_size] if r)
    seen: Set[str] = set()
    headers: List[str] = []
    for row in rows:
        for key in row.keys():
            key = str(key)
            if key not in seen:
                seen.add(key)
                headers.append(key)
    return ClassificationContext(
        filename=filename or "",
        sample_rows=rows,
        headers=tuple(headers),
        normalized_headers=frozenset(normalize_header(h) for h in headers),
    )


def _filename_has(tokens: Sequence[str]) -> Callable[[ClassificationContext], bool]:
    def predicate(ctx: ClassificationContext) -> bool:
        name = ctx.filename.lower()
        return any(tok in name for tok in tokens)

    return predicate


def _has_aaa_header(ctx: ClassificationContext) -> bool:
    return bool(ctx.normalized_headers & AAA_HEADER_TOKENS)


def _has_jams_header(ctx: ClassificationContext) -> bool:
    return any(ind in key for ind in JAMS_HEADER_INDICATORS for key in ctx.normalized_headers)


def _header_names_jams(ctx: ClassificationContext) -> bool:
    return any(tok in h.upper() for tok in JAMS_NAME_TOKENS for h in ctx.headers)


def _has_refno_value(ctx: ClassificationContext) -> bool:
    for row in ctx.sample_rows:
        for key in REFNO_KEYS:
            if key in row and not is_missing(row[key]):
                return True
    return False


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule("filename_aaa", _filename_has(AAA_FILENAME_TOKENS), Forum.AAA),
    ClassificationRule("filename_jams", _filename_has(JAMS_FILENAME_TOKENS), Forum.JAMS),
    ClassificationRule("header_aaa_signature", _has_aaa_header, Forum.AAA),
    ClassificationRule("header_jams_signature", _has_jams_header, Forum.JAMS),
    ClassificationRule("header_jams_name", _header_names_jams, Forum.JAMS),
    ClassificationRule("refno_value", _has_refno_value, Forum.JAMS),
    ClassificationRule("default", lambda ctx: True, DEFAULT_FORUM),
)


def classify_source(
    filename: str,
    sample_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    sample_size: int = DEFAULT_SAMPLE_ROWS,
    rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES,
) -> Classification:
    """Decide which forum produced a workbook.

    Never raises on ambiguous input; the table's last rule is an
    unconditional default.
    """

    ctx = build_context(filename, sample_rows, sample_size)
    trace: List[RuleOutcome] = []
    for rule in rules:
        matched = bool(rule.predicate(ctx))
        trace.append(RuleOutcome(rule.name, matched))
        if matched:
            return Classification(forum=rule.forum, rule=rule.name, trace=tuple(trace))
    return Classification(forum=DEFAULT_FORUM, rule="default", trace=tuple(trace))


def file_priority(forum: Forum) -> int:
    """Processing priority for a forum's files; AAA files sort first."""

    return FILE_PRIORITY[Forum(forum)]
