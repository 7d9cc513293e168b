"""Citation need and coverage models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from mlr_citations.models.enums import NeedPriority


class ReferenceNeed(BaseModel):
    """A phrase in content that must be backed by a citation."""

    id: str
    claim_text: str
    claim_type: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    required_evidence_levels: List[str] = Field(default_factory=list)
    priority: NeedPriority
    context: str = ""
    is_covered: bool = False


class CitationCoverage(BaseModel):
    coverage: float = Field(ge=0, le=100)
    compliance_score: float = Field(ge=0, le=100)
    needs: List[ReferenceNeed] = Field(default_factory=list)
    uncovered: List[ReferenceNeed] = Field(default_factory=list)
    reference_issues: List[str] = Field(default_factory=list)
