"""
Unit tests for the safety requirements report.
"""

import pytest

from mlr_citations.models import SafetyStatementType, StatementFilter
from mlr_citations.safety.requirements import SafetyRequirementsChecker, filter_statements
from tests.fixtures.evidence_store import FakeEvidenceStore, make_statement

BRAND = "brand-1"


@pytest.fixture
def safety_store() -> FakeEvidenceStore:
    return FakeEvidenceStore(
        statements=[
            make_statement(
                "liver",
                "Elevated liver enzymes; monitor liver tests before and during treatment.",
                "warning",
                severity="high",
            ),
            make_statement(
                "embryo",
                "Embryo-fetal toxicity: can cause fetal harm when administered to a pregnant woman.",
                "boxed_warning",
                severity="critical",
            ),
            make_statement(
                "gi",
                "Diarrhea was the most common adverse reaction reported in clinical trials.",
                "adverse_reaction",
                severity="medium",
            ),
            make_statement(
                "hyper",
                "Contraindicated in patients with known hypersensitivity to nintedanib.",
                "contraindication",
                severity="low",
                fda_required=True,
            ),
        ]
    )


@pytest.mark.asyncio
async def test_report_marks_required_and_present(safety_store) -> None:
    content = (
        "Clinically proven to slow decline. Monitor liver tests before and during treatment."
    )
    report = await SafetyRequirementsChecker(safety_store).evaluate(BRAND, content)

    assert report.error is None
    # Efficacy detected: boxed_warning, adverse_reaction, warning, precaution.
    assert report.required_types == [
        SafetyStatementType.BOXED_WARNING,
        SafetyStatementType.ADVERSE_REACTION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
    ]
    by_id = {c.statement.id: c for c in report.checks}
    assert set(by_id) == {"liver", "embryo", "gi"}
    assert by_id["liver"].is_present is True
    assert by_id["liver"].is_required is True
    assert by_id["embryo"].is_missing is True
    assert by_id["gi"].is_missing is True
    assert report.summary.required == 3
    assert report.summary.present == 1
    assert report.summary.missing == 2


@pytest.mark.asyncio
async def test_statement_types_filter_sent_to_store(safety_store) -> None:
    await SafetyRequirementsChecker(safety_store).evaluate(BRAND, "Once daily dosing.")
    name, brand, types = safety_store.calls[0]
    assert name == "find_safety_statements_by_brand"
    assert brand == BRAND
    assert types == ["warning", "precaution", "contraindication"]


@pytest.mark.asyncio
async def test_no_claims_checks_full_catalog(safety_store) -> None:
    report = await SafetyRequirementsChecker(safety_store).evaluate(BRAND, "See you at the congress.")

    assert safety_store.calls[0][2] is None
    assert len(report.checks) == 4
    required = {c.statement.id for c in report.checks if c.is_required}
    # Only fda_required and critical statements are required without detected claims.
    assert required == {"embryo", "hyper"}


@pytest.mark.asyncio
async def test_store_error_reported_not_raised(safety_store) -> None:
    safety_store.fail_on.add("find_safety_statements_by_brand")
    report = await SafetyRequirementsChecker(safety_store).evaluate(BRAND, "Clinically proven.")

    assert report.error is not None
    assert report.checks == []
    assert report.summary.missing == 0


@pytest.mark.asyncio
async def test_filter_views(safety_store) -> None:
    content = "Well-tolerated. Diarrhea was the most common adverse reaction reported in clinical trials."
    report = await SafetyRequirementsChecker(safety_store).evaluate(BRAND, content)

    all_ids = [c.statement.id for c in filter_statements(report.checks, StatementFilter.ALL)]
    missing_ids = [c.statement.id for c in filter_statements(report.checks, "missing")]
    present_ids = [c.statement.id for c in filter_statements(report.checks, StatementFilter.PRESENT)]

    assert all_ids == ["liver", "gi", "hyper"]
    assert missing_ids == ["liver", "hyper"]
    assert present_ids == ["gi"]
