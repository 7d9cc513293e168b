"""Validate cited claims against expiration, approval scope and substantiation."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import List, Optional

from mlr_citations.db.store import EvidenceStore
from mlr_citations.models import CitationValidationResult, ClaimRecord, ClaimUsage
from mlr_citations.utils.structured_log import log_store_call, log_validation_result

logger = logging.getLogger(__name__)

SCOPE_ALL = "all"


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps in the store are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_expired(claim: ClaimRecord, now: datetime) -> bool:
    return claim.expiration_date is not None and _as_utc(claim.expiration_date) < _as_utc(now)


def is_out_of_scope(claim: ClaimRecord, asset_type: str, audience: str) -> bool:
    if not claim.approval_scope:
        return False
    return not any(entry in (asset_type, audience, SCOPE_ALL) for entry in claim.approval_scope)


def lacks_references(claim: ClaimRecord) -> bool:
    return not claim.linked_reference_ids


class CitationValidator:
    """Read-only gate over the claims a piece of content cites."""

    def __init__(self, store: EvidenceStore):
        self.store = store

    async def validate_citations(
        self,
        claims_used: List[ClaimUsage],
        asset_type: str,
        audience: str,
        now: Optional[datetime] = None,
    ) -> CitationValidationResult:
        """Re-read each cited claim and report expired, out-of-scope and unreferenced ones.

        Claim data is always fetched fresh; the usage records are only used for
        their internal ids. A failed lookup cannot confirm anything, so it
        reports ``valid=False`` with empty issue lists.
        """
        if not claims_used:
            return CitationValidationResult(valid=True)

        claim_ids = list(dict.fromkeys(c.claim_id for c in claims_used))
        started = time.perf_counter()
        try:
            claims = await self.store.find_claims_by_ids(claim_ids)
        except Exception as exc:
            logger.error("Error fetching claims for validation: %s", exc)
            log_store_call("claims_by_id", "error", error=str(exc))
            log_validation_result(False)
            return CitationValidationResult(valid=False)
        log_store_call(
            "claims_by_id",
            "ok",
            records=len(claims),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )

        returned = {claim.id for claim in claims}
        vanished = [claim_id for claim_id in claim_ids if claim_id not in returned]
        if vanished:
            logger.warning("Cited claims no longer in the store: %s", ", ".join(vanished))

        # Report in citation order, not store order.
        position = {claim_id: idx for idx, claim_id in enumerate(claim_ids)}
        claims = sorted(claims, key=lambda c: position.get(c.id, len(position)))

        checked_at = now or datetime.now(timezone.utc)
        expired: list[str] = []
        scope_mismatches: list[str] = []
        missing_references: list[str] = []
        for claim in claims:
            if is_expired(claim, checked_at):
                expired.append(claim.display_id)
            if is_out_of_scope(claim, asset_type, audience):
                scope_mismatches.append(claim.display_id)
            if lacks_references(claim):
                missing_references.append(claim.display_id)

        valid = not (expired or scope_mismatches or missing_references)
        if not valid:
            logger.info(
                "Citation validation failed for %s/%s: expired=%s scope=%s unreferenced=%s",
                asset_type,
                audience,
                expired,
                scope_mismatches,
                missing_references,
            )
        log_validation_result(
            valid,
            expired_claims=expired,
            scope_mismatches=scope_mismatches,
            missing_references=missing_references,
        )
        return CitationValidationResult(
            valid=valid,
            expired_claims=expired,
            scope_mismatches=scope_mismatches,
            missing_references=missing_references,
        )
