"""Find phrases that need a citation and score how well content covers them.

Each need pattern carries the claim type it signals, the evidence levels a
supporting reference must have, and a review priority. A need is covered
when a claim marker or a rendered citation annotation follows the phrase
within the same sentence, or directly after the sentence's closing
punctuation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Tuple

from mlr_citations.citation.processor import CLAIM_MARKER_PATTERN
from mlr_citations.citation.renderer import ANNOTATION_PATTERN
from mlr_citations.models import CitationCoverage, NeedPriority, ReferenceNeed

logger = logging.getLogger(__name__)

CONTEXT_CHARS = 100
COVERAGE_WEIGHT = 0.7
CLEAN_REFERENCES_BONUS = 30

NO_REFERENCES_ISSUE = "No reference citations found in content"


@dataclass(frozen=True)
class NeedPattern:
    claim_type: str
    pattern: re.Pattern[str]
    required_evidence: Tuple[str, ...]
    priority: NeedPriority


def _need(claim_type: str, pattern: str, evidence: str, priority: NeedPriority) -> NeedPattern:
    return NeedPattern(claim_type, re.compile(pattern, re.IGNORECASE), tuple(evidence), priority)


REFERENCE_NEED_PATTERNS: Tuple[NeedPattern, ...] = (
    _need(
        "clinical_efficacy",
        r"\b(?:clinically proven|proven efficacy|studies show|clinical studies demonstrate)\b",
        "AB",
        NeedPriority.HIGH,
    ),
    _need(
        "comparative",
        r"\b(?:superior|better|outperforms|more effective than)\b",
        "A",
        NeedPriority.HIGH,
    ),
    _need(
        "statistical",
        r"\b\d+%\s*(?:improvement|reduction|increase|decrease)\b",
        "AB",
        NeedPriority.HIGH,
    ),
    _need(
        "safety",
        r"\b(?:well-tolerated|minimal side effects|safety profile)\b",
        "ABC",
        NeedPriority.MEDIUM,
    ),
    _need(
        "indication",
        r"\b(?:indicated for|approved for|first-line|second-line)\b",
        "A",
        NeedPriority.HIGH,
    ),
)

_PRIORITY_RANK = {NeedPriority.HIGH: 0, NeedPriority.MEDIUM: 1, NeedPriority.LOW: 2}

_SENTENCE_END = re.compile(r"[.!?](?=\s|$)")

# Citation styles already in the text: [1], (1), Reference 1, numbered entries.
_REFERENCE_PATTERNS: Tuple[re.Pattern[str], ...] = (
    CLAIM_MARKER_PATTERN,
    ANNOTATION_PATTERN,
    re.compile(r"\[\d+\]"),
    re.compile(r"\(\d+\)"),
    re.compile(r"(?:Reference|Ref\.?)\s*\d+", re.IGNORECASE),
    re.compile(r"\d+\.\s+[A-Z][^.]+\.\s+[A-Z][^.]+\.\s+\d{4}"),
)

_INCOMPLETE_PATTERNS: Tuple[Tuple[str, re.Pattern[str]], ...] = (
    ("[Reference]", re.compile(r"\[Reference\]", re.IGNORECASE)),
    ("[Ref]", re.compile(r"\[Ref\]", re.IGNORECASE)),
    ("[Citation needed]", re.compile(r"\[Citation needed\]", re.IGNORECASE)),
    ("TBD", re.compile(r"\bTBD\b", re.IGNORECASE)),
)


def _starts_with_citation(text: str) -> bool:
    stripped = text.lstrip()
    return bool(CLAIM_MARKER_PATTERN.match(stripped) or ANNOTATION_PATTERN.match(stripped))


def is_phrase_cited(content: str, end: int) -> bool:
    """True when a citation follows position ``end`` before the sentence closes."""
    stop = _SENTENCE_END.search(content, end)
    tail = content[end : stop.start()] if stop else content[end:]
    if CLAIM_MARKER_PATTERN.search(tail) or ANNOTATION_PATTERN.search(tail):
        return True
    return stop is not None and _starts_with_citation(content[stop.end() :])


def find_reference_needs(content: str) -> List[ReferenceNeed]:
    """Every phrase that needs a citation, highest priority first.

    Within a priority, needs keep pattern order and then document order.
    """
    if not content:
        return []
    needs: List[ReferenceNeed] = []
    for need_pattern in REFERENCE_NEED_PATTERNS:
        for match in need_pattern.pattern.finditer(content):
            start, end = match.span()
            needs.append(
                ReferenceNeed(
                    id=f"need-{len(needs) + 1}",
                    claim_text=match.group(0),
                    claim_type=need_pattern.claim_type,
                    start=start,
                    end=end,
                    required_evidence_levels=list(need_pattern.required_evidence),
                    priority=need_pattern.priority,
                    context=content[max(0, start - CONTEXT_CHARS) : end + CONTEXT_CHARS],
                    is_covered=is_phrase_cited(content, end),
                )
            )
    return sorted(needs, key=lambda need: _PRIORITY_RANK[need.priority])


def check_existing_references(content: str) -> List[str]:
    """Issues with the references already in content."""
    issues: List[str] = []
    text = content or ""
    if not any(pattern.search(text) for pattern in _REFERENCE_PATTERNS):
        issues.append(NO_REFERENCES_ISSUE)
    for label, pattern in _INCOMPLETE_PATTERNS:
        found = len(pattern.findall(text))
        if found:
            issues.append(f"Found {found} incomplete reference(s): {label}")
    return issues


def calculate_citation_coverage(content: str) -> CitationCoverage:
    """Share of citation needs that are cited, plus a 0-100 compliance score.

    Coverage is 100 when nothing needs a citation. The compliance score is
    ``coverage * 0.7``, plus 30 when the existing references raise no issues.
    """
    needs = find_reference_needs(content)
    issues = check_existing_references(content)
    uncovered = [need for need in needs if not need.is_covered]

    coverage = (len(needs) - len(uncovered)) / len(needs) * 100 if needs else 100.0
    bonus = CLEAN_REFERENCES_BONUS if not issues else 0
    compliance = max(0.0, coverage * COVERAGE_WEIGHT + bonus)
    logger.debug(
        "Citation coverage: %d needs, %d uncovered, %d reference issues",
        len(needs),
        len(uncovered),
        len(issues),
    )
    return CitationCoverage(
        coverage=round(coverage, 1),
        compliance_score=min(100.0, round(compliance, 1)),
        needs=needs,
        uncovered=uncovered,
        reference_issues=issues,
    )
