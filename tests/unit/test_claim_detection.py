"""
Unit tests for claim category detection.
"""

from mlr_citations.claims.detection import (
    analyze_content,
    is_statement_required_for_claims,
    required_safety_types_for_claims,
)
from mlr_citations.models import ClaimCategory, SafetyStatementType


class TestAnalyzeContent:
    """Test analyze_content."""

    def test_detects_efficacy_and_safety(self):
        analysis = analyze_content("This drug proved effective with reduced side effects")

        assert ClaimCategory.EFFICACY in analysis.detected_types
        assert ClaimCategory.SAFETY in analysis.detected_types
        phrases = {m.type: m.phrases for m in analysis.matches}
        assert phrases[ClaimCategory.EFFICACY] == ["effective"]
        assert phrases[ClaimCategory.SAFETY] == ["side effects"]
        assert analysis.confidence == 40

    def test_proved_does_not_match_proven(self):
        analysis = analyze_content("The team proved the point.")
        assert ClaimCategory.EFFICACY not in analysis.detected_types

    def test_empty_content(self):
        for content in ("", "   \n\t"):
            analysis = analyze_content(content)
            assert analysis.detected_types == []
            assert analysis.confidence == 0
            assert analysis.matches == []

    def test_no_claims_detected(self):
        analysis = analyze_content("Visit our booth at the annual congress.")
        assert analysis.detected_types == []
        assert analysis.confidence == 0

    def test_case_insensitive(self):
        analysis = analyze_content("SUPERIOR to placebo")
        assert analysis.detected_types == [ClaimCategory.COMPARATIVE]
        assert analysis.matches[0].phrases == ["superior"]

    def test_repeated_phrase_counted_once(self):
        analysis = analyze_content("Effective. Effective. effective!")
        assert analysis.matches[0].phrases == ["effective"]
        assert analysis.confidence == 20

    def test_confidence_saturates_at_100(self):
        content = (
            "Clinically proven efficacy, superior to placebo, well-tolerated, "
            "once daily dosing, indicated for patients with IPF, inhibits the pathway."
        )
        analysis = analyze_content(content)
        assert analysis.confidence == 100

    def test_detected_types_follow_category_order(self):
        analysis = analyze_content("Well-tolerated and superior; clinically proven.")
        assert analysis.detected_types == [
            ClaimCategory.EFFICACY,
            ClaimCategory.COMPARATIVE,
            ClaimCategory.TOLERABILITY,
        ]


class TestRequiredSafetyTypes:
    """Test claim category to safety type mapping."""

    def test_empty_categories(self):
        assert required_safety_types_for_claims([]) == []

    def test_mechanism_only(self):
        assert required_safety_types_for_claims([ClaimCategory.MECHANISM]) == [
            SafetyStatementType.WARNING,
            SafetyStatementType.PRECAUTION,
        ]

    def test_union_is_deduplicated(self):
        required = required_safety_types_for_claims(
            [ClaimCategory.EFFICACY, ClaimCategory.SAFETY, ClaimCategory.MECHANISM]
        )
        assert len(required) == len(set(required))
        assert set(required) == {
            SafetyStatementType.BOXED_WARNING,
            SafetyStatementType.ADVERSE_REACTION,
            SafetyStatementType.WARNING,
            SafetyStatementType.PRECAUTION,
            SafetyStatementType.CONTRAINDICATION,
        }

    def test_accepts_string_categories(self):
        assert required_safety_types_for_claims(["dosing"]) == [
            SafetyStatementType.WARNING,
            SafetyStatementType.PRECAUTION,
            SafetyStatementType.CONTRAINDICATION,
        ]

    def test_unknown_category_ignored(self):
        assert required_safety_types_for_claims(["statistical"]) == []

    def test_is_statement_required(self):
        categories = [ClaimCategory.TOLERABILITY]
        assert is_statement_required_for_claims("adverse_reaction", categories) is True
        assert is_statement_required_for_claims(SafetyStatementType.WARNING, categories) is True
        assert is_statement_required_for_claims("boxed_warning", categories) is False
        assert is_statement_required_for_claims("warning", []) is False
