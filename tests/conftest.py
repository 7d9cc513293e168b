"""
Pytest configuration and fixtures.
"""

import pytest

from mlr_citations.utils.structured_log import reset_audit_logging
from tests.fixtures.evidence_store import FakeEvidenceStore, make_claim, make_reference


@pytest.fixture
def evidence_store() -> FakeEvidenceStore:
    """Store with two claims sharing reference r1, plus one unreferenced claim."""
    return FakeEvidenceStore(
        claims=[
            make_claim("CML-001", ["r1"]),
            make_claim("CML-002", ["r1", "r2"]),
            make_claim("CML-NOREF", []),
        ],
        references=[make_reference("r1"), make_reference("r2")],
    )


@pytest.fixture(autouse=True)
def _reset_audit_log():
    yield
    reset_audit_logging()
