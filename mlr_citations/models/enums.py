"""Enum definitions for claims and safety statements."""

from enum import Enum


class ClaimCategory(str, Enum):
    EFFICACY = "efficacy"
    SAFETY = "safety"
    COMPARATIVE = "comparative"
    DOSING = "dosing"
    INDICATION = "indication"
    MECHANISM = "mechanism"
    TOLERABILITY = "tolerability"


class SafetyStatementType(str, Enum):
    BOXED_WARNING = "boxed_warning"
    CONTRAINDICATION = "contraindication"
    WARNING = "warning"
    PRECAUTION = "precaution"
    WARNING_PRECAUTION = "warning_precaution"
    ADVERSE_REACTION = "adverse_reaction"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StatementFilter(str, Enum):
    ALL = "all"
    MISSING = "missing"  # required but not present
    PRESENT = "present"


class CitationStyle(str, Enum):
    AMA = "ama"
    VANCOUVER = "vancouver"
    NATURE = "nature"


class NeedPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
