from mlr_citations.claims.detection import (
    analyze_content,
    is_statement_required_for_claims,
    required_safety_types_for_claims,
)

__all__ = [
    "analyze_content",
    "is_statement_required_for_claims",
    "required_safety_types_for_claims",
]
