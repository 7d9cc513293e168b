"""Safety statement and claim analysis models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from mlr_citations.models.enums import ClaimCategory, SafetyStatementType


class SafetyStatementRecord(BaseModel):
    id: str
    brand_id: Optional[str] = None
    text: str
    statement_type: str
    severity: str = "medium"
    fda_required: bool = False

    @field_validator("fda_required", mode="before")
    @classmethod
    def _null_flag(cls, value: object) -> object:
        return False if value is None else value


class CategoryMatch(BaseModel):
    type: ClaimCategory
    phrases: List[str] = Field(default_factory=list)


class ClaimAnalysis(BaseModel):
    detected_types: List[ClaimCategory] = Field(default_factory=list)
    confidence: int = Field(ge=0, le=100, default=0)
    matches: List[CategoryMatch] = Field(default_factory=list)


class PresenceResult(BaseModel):
    is_present: bool = False
    matched_phrases: List[str] = Field(default_factory=list)


class SafetyStatementCheck(BaseModel):
    statement: SafetyStatementRecord
    is_present: bool
    is_required: bool
    matched_phrases: List[str] = Field(default_factory=list)

    @property
    def is_missing(self) -> bool:
        return self.is_required and not self.is_present


class SafetySummary(BaseModel):
    required: int = 0
    present: int = 0
    missing: int = 0


class SafetyRequirementsReport(BaseModel):
    analysis: ClaimAnalysis = Field(default_factory=ClaimAnalysis)
    required_types: List[SafetyStatementType] = Field(default_factory=list)
    checks: List[SafetyStatementCheck] = Field(default_factory=list)
    summary: SafetySummary = Field(default_factory=SafetySummary)
    error: Optional[str] = None
