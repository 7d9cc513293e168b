"""Evaluate a brand's safety statement catalog against a piece of content."""

from __future__ import annotations

import logging
import time
from typing import List

from mlr_citations.claims.detection import (
    analyze_content,
    is_statement_required_for_claims,
    required_safety_types_for_claims,
)
from mlr_citations.db.store import EvidenceStore
from mlr_citations.models import (
    ClaimAnalysis,
    SafetyRequirementsReport,
    SafetyStatementCheck,
    SafetyStatementRecord,
    SafetySummary,
    Severity,
    StatementFilter,
)
from mlr_citations.safety.presence import check_presence
from mlr_citations.utils.structured_log import log_store_call

logger = logging.getLogger(__name__)


def evaluate_statement(
    statement: SafetyStatementRecord,
    content: str,
    analysis: ClaimAnalysis,
) -> SafetyStatementCheck:
    presence = check_presence(statement.text, content)
    is_required = (
        statement.fda_required
        or statement.severity == Severity.CRITICAL.value
        or is_statement_required_for_claims(statement.statement_type, analysis.detected_types)
    )
    return SafetyStatementCheck(
        statement=statement,
        is_present=presence.is_present,
        is_required=is_required,
        matched_phrases=presence.matched_phrases,
    )


def summarize(checks: List[SafetyStatementCheck]) -> SafetySummary:
    return SafetySummary(
        required=sum(1 for c in checks if c.is_required),
        present=sum(1 for c in checks if c.is_present),
        missing=sum(1 for c in checks if c.is_missing),
    )


def filter_statements(
    checks: List[SafetyStatementCheck],
    view: StatementFilter | str = StatementFilter.ALL,
) -> List[SafetyStatementCheck]:
    view = StatementFilter(view)
    if view == StatementFilter.MISSING:
        return [c for c in checks if c.is_missing]
    if view == StatementFilter.PRESENT:
        return [c for c in checks if c.is_present]
    return list(checks)


class SafetyRequirementsChecker:
    """Checks content for the safety statements its claims call for."""

    def __init__(self, store: EvidenceStore):
        self.store = store

    async def evaluate(self, brand_id: str, content: str) -> SafetyRequirementsReport:
        """Build the safety requirements report for content.

        When claim categories are detected, only statements of the types they
        require are fetched; otherwise the brand's full catalog is checked.
        Statements of other types are then absent from the report even when
        they are fda_required or critical, so the report shows what the
        detected claims call for rather than the whole label.
        A failed lookup yields an empty report carrying the error message.
        """
        analysis = analyze_content(content)
        required_types = required_safety_types_for_claims(analysis.detected_types)

        started = time.perf_counter()
        try:
            statements = await self.store.find_safety_statements_by_brand(
                brand_id,
                [t.value for t in required_types] or None,
            )
        except Exception as exc:
            logger.error("Error loading safety statements for brand %s: %s", brand_id, exc)
            log_store_call("safety_statements", "error", error=str(exc))
            return SafetyRequirementsReport(
                analysis=analysis,
                required_types=required_types,
                error=str(exc),
            )
        log_store_call(
            "safety_statements",
            "ok",
            records=len(statements),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )

        checks = [evaluate_statement(s, content, analysis) for s in statements]
        summary = summarize(checks)
        logger.debug(
            "Safety check for brand %s: %d required, %d present, %d missing",
            brand_id,
            summary.required,
            summary.present,
            summary.missing,
        )
        return SafetyRequirementsReport(
            analysis=analysis,
            required_types=required_types,
            checks=checks,
            summary=summary,
        )
