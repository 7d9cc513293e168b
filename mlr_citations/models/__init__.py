"""Model exports."""

from mlr_citations.models.claims import (
    CitationValidationResult,
    ClaimRecord,
    ClaimUsage,
    ProcessedContent,
    ReferenceRecord,
    ReferenceUsage,
)
from mlr_citations.models.coverage import CitationCoverage, ReferenceNeed
from mlr_citations.models.config import LoggingConfig, SettingsConfig, ValidationConfig
from mlr_citations.models.enums import (
    CitationStyle,
    ClaimCategory,
    NeedPriority,
    SafetyStatementType,
    Severity,
    StatementFilter,
)
from mlr_citations.models.safety import (
    CategoryMatch,
    ClaimAnalysis,
    PresenceResult,
    SafetyRequirementsReport,
    SafetyStatementCheck,
    SafetyStatementRecord,
    SafetySummary,
)

__all__ = [
    "CategoryMatch",
    "CitationCoverage",
    "CitationStyle",
    "CitationValidationResult",
    "ClaimAnalysis",
    "ClaimCategory",
    "ClaimRecord",
    "ClaimUsage",
    "LoggingConfig",
    "NeedPriority",
    "PresenceResult",
    "ProcessedContent",
    "ReferenceNeed",
    "ReferenceRecord",
    "ReferenceUsage",
    "SafetyRequirementsReport",
    "SafetyStatementCheck",
    "SafetyStatementRecord",
    "SafetyStatementType",
    "SafetySummary",
    "SettingsConfig",
    "Severity",
    "StatementFilter",
    "ValidationConfig",
]
