"""
Unit tests for citation need detection and coverage scoring.
"""

from mlr_citations.citation.coverage import (
    NO_REFERENCES_ISSUE,
    calculate_citation_coverage,
    check_existing_references,
    find_reference_needs,
    is_phrase_cited,
)
from mlr_citations.citation.renderer import render_annotation
from mlr_citations.models import NeedPriority


class TestFindReferenceNeeds:
    def test_high_priority_needs_come_first(self):
        needs = find_reference_needs("Well-tolerated in trials. Indicated for IPF.")

        assert [(n.id, n.claim_text, n.priority) for n in needs] == [
            ("need-2", "Indicated for", NeedPriority.HIGH),
            ("need-1", "Well-tolerated", NeedPriority.MEDIUM),
        ]
        assert (needs[1].start, needs[1].end) == (0, 14)

    def test_need_details(self):
        needs = find_reference_needs("A 45% reduction in decline, superior to placebo.")

        by_type = {n.claim_type: n for n in needs}
        assert by_type["statistical"].claim_text == "45% reduction"
        assert by_type["statistical"].required_evidence_levels == ["A", "B"]
        assert by_type["comparative"].required_evidence_levels == ["A"]

    def test_context_spans_hundred_chars_each_side(self):
        content = "x" * 150 + " studies show " + "y" * 150
        (need,) = find_reference_needs(content)

        assert need.start == 151
        assert len(need.context) == 100 + len("studies show") + 100
        assert need.context.startswith("x") and need.context.endswith("y")

    def test_empty_content(self):
        assert find_reference_needs("") == []


class TestPhraseCited:
    def test_marker_later_in_same_sentence(self):
        content = "Clinically proven to slow decline [CLAIM:CML-001]. Superior to placebo."
        needs = {n.claim_text: n for n in find_reference_needs(content)}

        assert needs["Clinically proven"].is_covered is True
        assert needs["Superior"].is_covered is False

    def test_marker_in_next_sentence_does_not_count(self):
        content = "Superior to placebo. Other text [CLAIM:CML-001]."
        assert is_phrase_cited(content, content.index("Superior") + len("Superior")) is False

    def test_annotation_right_after_sentence_end(self):
        content = "Clinically proven. " + render_annotation("claim-fvc", 1) + " More text."
        assert is_phrase_cited(content, len("Clinically proven")) is True


class TestExistingReferences:
    def test_no_references(self):
        assert check_existing_references("Take with food.") == [NO_REFERENCES_ISSUE]

    def test_numbered_reference_is_enough(self):
        assert check_existing_references("See the trial [1].") == []

    def test_incomplete_placeholders(self):
        issues = check_existing_references("Data (2) [Citation needed] and [Ref] TBD, tbd.")
        assert issues == [
            "Found 1 incomplete reference(s): [Ref]",
            "Found 1 incomplete reference(s): [Citation needed]",
            "Found 2 incomplete reference(s): TBD",
        ]


class TestCoverage:
    def test_nothing_to_cite_is_full_coverage(self):
        result = calculate_citation_coverage("See the trial [1].")
        assert (result.coverage, result.compliance_score) == (100.0, 100.0)

        result = calculate_citation_coverage("Take with food.")
        assert result.coverage == 100.0
        assert result.compliance_score == 70.0

    def test_half_covered(self):
        content = "Clinically proven [CLAIM:CML-001] to slow decline. Superior to placebo."
        result = calculate_citation_coverage(content)

        assert result.coverage == 50.0
        assert result.compliance_score == 65.0
        assert [n.claim_text for n in result.uncovered] == ["Superior"]
        assert result.reference_issues == []

    def test_reference_issues_remove_bonus(self):
        result = calculate_citation_coverage("Proven efficacy [Citation needed]. TBD")

        assert result.coverage == 0.0
        assert result.compliance_score == 0.0
        assert NO_REFERENCES_ISSUE in result.reference_issues
        assert len(result.reference_issues) == 3
