"""
Unit tests for citation validation.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from mlr_citations.citation.validator import CitationValidator, is_expired, is_out_of_scope
from mlr_citations.models import ClaimUsage
from tests.fixtures.evidence_store import FakeEvidenceStore, make_claim

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _usage(claim, number: int = 1) -> ClaimUsage:
    return ClaimUsage(
        claim_id=claim.id,
        claim_display_id=claim.display_id,
        claim_text=claim.text,
        citation_number=number,
        linked_references=[],
    )


@pytest.mark.asyncio
async def test_valid_claims_pass() -> None:
    claim = make_claim(
        "CML-OK",
        ["r1"],
        expiration_date=NOW + timedelta(days=30),
        approval_scope=["email", "hcp"],
    )
    validator = CitationValidator(FakeEvidenceStore(claims=[claim]))
    result = await validator.validate_citations([_usage(claim)], "email", "patient", now=NOW)

    assert result.valid is True
    assert result.issue_count == 0


@pytest.mark.asyncio
async def test_expired_claim_reported() -> None:
    claim = make_claim("CML-OLD", ["r1"], expiration_date=NOW - timedelta(days=1))
    validator = CitationValidator(FakeEvidenceStore(claims=[claim]))
    result = await validator.validate_citations([_usage(claim)], "email", "hcp", now=NOW)

    assert result.valid is False
    assert result.expired_claims == ["CML-OLD"]
    assert result.scope_mismatches == []
    assert result.missing_references == []


@pytest.mark.asyncio
async def test_scope_mismatch_and_missing_references() -> None:
    out_of_scope = make_claim("CML-WEB", ["r1"], approval_scope=["website"])
    all_scope = make_claim("CML-ALL", ["r1"], approval_scope=["all"])
    unreferenced = make_claim("CML-BARE", [])
    store = FakeEvidenceStore(claims=[unreferenced, all_scope, out_of_scope])
    usages = [_usage(out_of_scope, 1), _usage(all_scope, 2), _usage(unreferenced, 3)]

    result = await CitationValidator(store).validate_citations(usages, "email", "hcp", now=NOW)

    assert result.valid is False
    assert result.scope_mismatches == ["CML-WEB"]
    assert result.missing_references == ["CML-BARE"]
    assert result.expired_claims == []


@pytest.mark.asyncio
async def test_reads_fresh_claim_data() -> None:
    claim = make_claim("CML-1", ["r1"])
    store = FakeEvidenceStore(claims=[make_claim("CML-1", [], id=claim.id)])
    usage = _usage(claim)
    usage.linked_references = ["REF-1"]

    result = await CitationValidator(store).validate_citations([usage], "email", "hcp", now=NOW)

    assert result.missing_references == ["CML-1"]
    assert store.calls == [("find_claims_by_ids", [claim.id])]


@pytest.mark.asyncio
async def test_empty_usage_is_valid_without_lookup() -> None:
    store = FakeEvidenceStore()
    result = await CitationValidator(store).validate_citations([], "email", "hcp")
    assert result.valid is True
    assert store.calls == []


@pytest.mark.asyncio
async def test_store_error_is_not_valid() -> None:
    claim = make_claim("CML-1", ["r1"])
    store = FakeEvidenceStore(claims=[claim])
    store.fail_on.add("find_claims_by_ids")

    result = await CitationValidator(store).validate_citations([_usage(claim)], "email", "hcp")

    assert result.valid is False
    assert result.issue_count == 0


def test_is_expired_handles_naive_timestamps() -> None:
    naive_past = make_claim("CML-1", expiration_date=datetime(2026, 5, 31, 23, 0))
    assert is_expired(naive_past, NOW) is True
    assert is_expired(make_claim("CML-2"), NOW) is False
    exactly_now = make_claim("CML-3", expiration_date=NOW)
    assert is_expired(exactly_now, NOW) is False


def test_is_out_of_scope() -> None:
    assert is_out_of_scope(make_claim("CML-1"), "email", "hcp") is False
    assert is_out_of_scope(make_claim("CML-1", approval_scope=["hcp"]), "email", "hcp") is False
    assert is_out_of_scope(make_claim("CML-1", approval_scope=["Email"]), "email", "hcp") is True


@pytest.mark.asyncio
async def test_claim_missing_from_fresh_read_is_logged(caplog) -> None:
    kept = make_claim("CML-1", ["r1"])
    deleted = make_claim("CML-GONE", ["r1"])
    store = FakeEvidenceStore(claims=[kept])
    caplog.set_level(logging.WARNING, logger="mlr_citations")

    result = await CitationValidator(store).validate_citations(
        [_usage(kept), _usage(deleted, 2)], "email", "hcp", now=NOW
    )

    assert result.valid is True
    assert "Cited claims no longer in the store: uuid-cml-gone" in caplog.text
