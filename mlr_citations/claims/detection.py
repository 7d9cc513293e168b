"""Regex-based claim category detection for promotional content.

Content is classified into seven claim categories. Each category owns an
ordered set of case-insensitive patterns; a category is detected when any of
its patterns matches. Detected categories drive which safety statement types
the content must carry (fair balance).
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

from mlr_citations.models import CategoryMatch, ClaimAnalysis, ClaimCategory, SafetyStatementType

# Matched phrases needed for a 100% confidence score.
CONFIDENCE_SATURATION = 5


def _compile(*patterns: str) -> Tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


CLAIM_PATTERNS: Dict[ClaimCategory, Tuple[re.Pattern[str], ...]] = {
    ClaimCategory.EFFICACY: _compile(
        r"\bclinically proven\b",
        r"\bproven\b",
        r"\beffective(?:ness)?\b",
        r"\befficacy\b",
        r"\bdemonstrated (?:efficacy|improvement|benefit)\b",
        r"\b(?:studies|data) (?:show|shows|showed|demonstrate[sd]?)\b",
        r"\bsignificant(?:ly)? improv\w*",
        r"\bresponse rates?\b",
        r"\b\d+(?:\.\d+)?%\s*(?:improvement|reduction|response)\b",
    ),
    ClaimCategory.SAFETY: _compile(
        r"\bside effects?\b",
        r"\bsafety profile\b",
        r"\bsafe and effective\b",
        r"\bsafe\b",
        r"\badverse (?:events?|reactions?|effects?)\b",
        r"\bno significant adverse\b",
    ),
    ClaimCategory.COMPARATIVE: _compile(
        r"\bsuperior(?:ity)?\b",
        r"\bbetter than\b",
        r"\boutperform(?:s|ed)?\b",
        r"\bmore effective than\b",
        r"\bcompared (?:to|with)\b",
        r"\bversus\b",
        r"\bhead-to-head\b",
        r"\bfirst and only\b",
    ),
    ClaimCategory.DOSING: _compile(
        r"\bonce[- ](?:daily|weekly|monthly)\b",
        r"\btwice[- ]daily\b",
        r"\b\d+(?:\.\d+)?\s?(?:mg|mcg|ml)\b",
        r"\bdos(?:e|es|ing|age)\b",
        r"\badminister(?:ed)?\b",
        r"\btitrat\w*",
    ),
    ClaimCategory.INDICATION: _compile(
        r"\bindicated (?:for|in)\b",
        r"\bapproved for\b",
        r"\bfirst-line\b",
        r"\bsecond-line\b",
        r"\btreatment of\b",
        r"\bpatients with\b",
    ),
    ClaimCategory.MECHANISM: _compile(
        r"\bmechanism of action\b",
        r"\binhibit(?:s|or|ors|ion)?\b",
        r"\bblocks?\b",
        r"\breceptors?\b",
        r"\bpathways?\b",
        r"\bbinds? to\b",
    ),
    ClaimCategory.TOLERABILITY: _compile(
        r"\bwell[- ]tolerated\b",
        r"\btolerab(?:le|ility)\b",
        r"\bdiscontinuation\b",
        r"\bminimal side effects\b",
    ),
}

CLAIM_SAFETY_REQUIREMENTS: Dict[ClaimCategory, Tuple[SafetyStatementType, ...]] = {
    ClaimCategory.EFFICACY: (
        SafetyStatementType.BOXED_WARNING,
        SafetyStatementType.ADVERSE_REACTION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
    ),
    ClaimCategory.SAFETY: (
        SafetyStatementType.CONTRAINDICATION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
        SafetyStatementType.ADVERSE_REACTION,
    ),
    ClaimCategory.COMPARATIVE: (
        SafetyStatementType.BOXED_WARNING,
        SafetyStatementType.ADVERSE_REACTION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
        SafetyStatementType.CONTRAINDICATION,
    ),
    ClaimCategory.DOSING: (
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
        SafetyStatementType.CONTRAINDICATION,
    ),
    ClaimCategory.INDICATION: (
        SafetyStatementType.BOXED_WARNING,
        SafetyStatementType.CONTRAINDICATION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
    ),
    ClaimCategory.MECHANISM: (
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
    ),
    ClaimCategory.TOLERABILITY: (
        SafetyStatementType.ADVERSE_REACTION,
        SafetyStatementType.WARNING,
        SafetyStatementType.PRECAUTION,
    ),
}

CLAIM_CATEGORY_LABELS: Dict[ClaimCategory, str] = {
    category: category.value.capitalize() for category in ClaimCategory
}

SAFETY_TYPE_LABELS: Dict[str, str] = {
    SafetyStatementType.BOXED_WARNING.value: "Boxed Warning",
    SafetyStatementType.CONTRAINDICATION.value: "Contraindication",
    SafetyStatementType.WARNING.value: "Warning",
    SafetyStatementType.PRECAUTION.value: "Precaution",
    SafetyStatementType.WARNING_PRECAUTION.value: "Warning/Precaution",
    SafetyStatementType.ADVERSE_REACTION.value: "Adverse Reaction",
}


def _dedupe(values: Iterable) -> list:
    return list(dict.fromkeys(values))


def analyze_content(content: str) -> ClaimAnalysis:
    """Classify content into claim categories.

    Returns the detected categories in fixed category order, the distinct
    phrases each one matched, and a 0-100 confidence that saturates at
    CONFIDENCE_SATURATION matched phrases.
    """
    if not content or not content.strip():
        return ClaimAnalysis()

    lowered = content.lower()
    matches: List[CategoryMatch] = []
    total_phrases = 0

    for category, patterns in CLAIM_PATTERNS.items():
        phrases: list[str] = []
        for pattern in patterns:
            phrases.extend(m.group(0) for m in pattern.finditer(lowered))
        phrases = _dedupe(phrases)
        if phrases:
            matches.append(CategoryMatch(type=category, phrases=phrases))
            total_phrases += len(phrases)

    confidence = min(100, round(total_phrases / CONFIDENCE_SATURATION * 100))
    return ClaimAnalysis(
        detected_types=[m.type for m in matches],
        confidence=confidence,
        matches=matches,
    )


def required_safety_types_for_claims(
    categories: Iterable[ClaimCategory | str],
) -> List[SafetyStatementType]:
    """Union of safety statement types required by the given claim categories."""
    required: list[SafetyStatementType] = []
    for category in categories:
        try:
            key = ClaimCategory(category)
        except ValueError:
            continue
        required.extend(CLAIM_SAFETY_REQUIREMENTS[key])
    return _dedupe(required)


def is_statement_required_for_claims(
    statement_type: SafetyStatementType | str,
    categories: Iterable[ClaimCategory | str],
) -> bool:
    required = {t.value for t in required_safety_types_for_claims(categories)}
    value = statement_type.value if isinstance(statement_type, SafetyStatementType) else str(statement_type)
    return value in required
