"""Inline citation annotation markup: rendering and parsing back."""

from __future__ import annotations

import html
import re
from typing import List, Tuple

ANNOTATION_PATTERN = re.compile(
    r'<sup class="citation-marker" data-claim-id="([^"]*)" data-citation-num="(\d+)">\d+</sup>'
)


def render_annotation(claim_id: str, citation_number: int) -> str:
    """Superscript marker carrying the claim's internal id and its citation number."""
    return (
        f'<sup class="citation-marker" data-claim-id="{html.escape(claim_id, quote=True)}" '
        f'data-citation-num="{citation_number}">{citation_number}</sup>'
    )


def extract_citation_annotations(content: str) -> List[Tuple[str, int]]:
    """Return (claim_id, citation_number) for every annotation, in document order."""
    return [
        (html.unescape(m.group(1)), int(m.group(2)))
        for m in ANNOTATION_PATTERN.finditer(content or "")
    ]


def strip_citation_annotations(content: str) -> str:
    return ANNOTATION_PATTERN.sub("", content or "")
