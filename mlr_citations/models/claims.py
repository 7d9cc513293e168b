"""Claim, reference and citation usage models."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ClaimRecord(BaseModel):
    id: str
    display_id: str
    brand_id: Optional[str] = None
    text: str = ""
    linked_reference_ids: List[str] = Field(default_factory=list)
    expiration_date: Optional[datetime] = None
    approval_scope: List[str] = Field(default_factory=list)

    @field_validator("linked_reference_ids", "approval_scope", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        # Store rows may carry NULL for list columns.
        return [] if value is None else value

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, value: object) -> object:
        return "" if value is None else value


class ReferenceRecord(BaseModel):
    id: str
    display_id: Optional[str] = None
    formatted_citation: Optional[str] = None
    raw_text: Optional[str] = None
    # Bibliographic fields, used to format a citation when none is stored.
    authors: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    journal: Optional[str] = None
    year: Optional[int] = None
    doi: Optional[str] = None

    @field_validator("authors", mode="before")
    @classmethod
    def _none_authors(cls, value: object) -> object:
        return [] if value is None else value


class ClaimUsage(BaseModel):
    claim_id: str
    claim_display_id: str
    claim_text: str
    citation_number: int = Field(ge=1)
    linked_references: List[str] = Field(default_factory=list)


class ReferenceUsage(BaseModel):
    reference_id: str
    reference_display_id: str
    formatted_citation: str
    citation_number: int = Field(ge=1)


class ProcessedContent(BaseModel):
    """Annotated content plus the claims and references it cites."""

    content: str
    claims_used: List[ClaimUsage] = Field(default_factory=list)
    references_used: List[ReferenceUsage] = Field(default_factory=list)


class CitationValidationResult(BaseModel):
    """Outcome of validating the claims cited by a piece of content.

    All id lists hold claim display ids.
    """

    valid: bool
    expired_claims: List[str] = Field(default_factory=list)
    scope_mismatches: List[str] = Field(default_factory=list)
    missing_references: List[str] = Field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return len(self.expired_claims) + len(self.scope_mismatches) + len(self.missing_references)
