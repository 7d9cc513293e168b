"""Abstract evidence store protocol for claim, reference and safety lookups."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from mlr_citations.models import ClaimRecord, ReferenceRecord, SafetyStatementRecord


@runtime_checkable
class EvidenceStore(Protocol):
    """Structural protocol satisfied by any read interface over the evidence catalog.

    Every method is a single batch round-trip. Implementors raise
    EvidenceStoreError (or a subclass) on failure; callers decide whether
    to degrade.
    """

    async def find_claims_by_display_ids(
        self, brand_id: str, display_ids: Sequence[str]
    ) -> list[ClaimRecord]:
        """Return the brand's claims whose display id is in display_ids."""
        ...

    async def find_references_by_ids(self, reference_ids: Sequence[str]) -> list[ReferenceRecord]:
        """Return references by internal id."""
        ...

    async def find_claims_by_ids(self, claim_ids: Sequence[str]) -> list[ClaimRecord]:
        """Return claims by internal id, including expiration and scope."""
        ...

    async def find_safety_statements_by_brand(
        self,
        brand_id: str,
        statement_types: Sequence[str] | None = None,
    ) -> list[SafetyStatementRecord]:
        """Return the brand's safety statements, most severe first."""
        ...
