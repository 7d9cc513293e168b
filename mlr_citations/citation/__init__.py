from mlr_citations.citation.processor import (
    CLAIM_MARKER_PATTERN,
    CitationProcessor,
    format_citation,
    format_references_section,
)
from mlr_citations.citation.renderer import (
    extract_citation_annotations,
    render_annotation,
    strip_citation_annotations,
)
from mlr_citations.citation.coverage import calculate_citation_coverage, find_reference_needs
from mlr_citations.citation.validator import CitationValidator

__all__ = [
    "CLAIM_MARKER_PATTERN",
    "CitationProcessor",
    "CitationValidator",
    "calculate_citation_coverage",
    "extract_citation_annotations",
    "find_reference_needs",
    "format_citation",
    "format_references_section",
    "render_annotation",
    "strip_citation_annotations",
]
