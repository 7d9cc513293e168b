"""Resolve inline claim markers into numbered citations and a reference list.

Generated content carries markers of the form ``[CLAIM:CML-xxxx]``. Each
distinct claim gets a citation number in order of first appearance; the
references its claims link to are collected once each, numbered in the
order they are first added. Processing is best-effort: any store failure
returns the content untouched.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Dict, List

from mlr_citations.citation.renderer import render_annotation
from mlr_citations.db.store import EvidenceStore
from mlr_citations.models import (
    CitationStyle,
    ClaimRecord,
    ClaimUsage,
    ProcessedContent,
    ReferenceRecord,
    ReferenceUsage,
)
from mlr_citations.utils.structured_log import log_citation_result, log_store_call

logger = logging.getLogger(__name__)

CLAIM_MARKER_PATTERN = re.compile(r"\[CLAIM:(CML-[A-Za-z0-9]+)\]")

MISSING_CITATION_TEXT = "Citation Text Missing"


def find_marker_ids(content: str) -> List[str]:
    """Distinct claim display ids in order of first appearance."""
    return list(dict.fromkeys(m.group(1) for m in CLAIM_MARKER_PATTERN.finditer(content or "")))


def format_references_section(references: List[ReferenceUsage]) -> str:
    """Numbered reference list, one ``n. citation`` line per reference."""
    if not references:
        return ""
    ordered = sorted(references, key=lambda ref: ref.citation_number)
    return "\n".join(f"{ref.citation_number}. {ref.formatted_citation}" for ref in ordered)


def _format_ama(ref: ReferenceRecord) -> str:
    if len(ref.authors) > 3:
        authors = f"{', '.join(ref.authors[:3])}, et al"
    else:
        authors = ", ".join(ref.authors)
    text = f"{authors}. {ref.title}."
    if ref.journal:
        text += f" {ref.journal}."
    text += f" {ref.year or ''}".rstrip()
    if ref.doi:
        text += f". doi:{ref.doi}"
    return text


def _format_vancouver(ref: ReferenceRecord) -> str:
    text = f"{', '.join(ref.authors)}. {ref.title}."
    if ref.journal:
        text += f" {ref.journal}"
    text += f" {ref.year or ''}".rstrip()
    if ref.doi:
        text += f". Available from: https://doi.org/{ref.doi}"
    return text


def _format_nature(ref: ReferenceRecord) -> str:
    parts = [", ".join(ref.authors), f"{ref.title}."]
    if ref.journal:
        parts.append(ref.journal)
    if ref.year:
        parts.append(str(ref.year))
    if ref.doi:
        parts.append(f"https://doi.org/{ref.doi}")
    return " ".join(p for p in parts if p)


_CITATION_FORMATTERS: Dict[CitationStyle, Callable[[ReferenceRecord], str]] = {
    CitationStyle.AMA: _format_ama,
    CitationStyle.VANCOUVER: _format_vancouver,
    CitationStyle.NATURE: _format_nature,
}


def format_citation(reference: ReferenceRecord, style: CitationStyle | str = CitationStyle.AMA) -> str:
    """Format a reference from its bibliographic fields.

    AMA truncates to three authors followed by ``et al``; Vancouver and Nature
    list every author. Unknown styles fall back to AMA.
    """
    try:
        key = CitationStyle(style)
    except ValueError:
        key = CitationStyle.AMA
    return _CITATION_FORMATTERS[key](reference)


def resolve_citation_text(reference: ReferenceRecord, style: CitationStyle | str = CitationStyle.AMA) -> str:
    if reference.formatted_citation:
        return reference.formatted_citation
    if reference.title:
        return format_citation(reference, style)
    return reference.raw_text or MISSING_CITATION_TEXT


class CitationProcessor:
    """Turns claim markers into superscript citations backed by the evidence store."""

    def __init__(self, store: EvidenceStore, citation_style: CitationStyle | str = CitationStyle.AMA):
        self.store = store
        self.citation_style = citation_style

    async def process_content(self, raw_content: str, brand_id: str) -> ProcessedContent:
        unchanged = ProcessedContent(content=raw_content or "")
        display_ids = find_marker_ids(raw_content)
        logger.debug(
            "Processing content for brand %s: %d chars, %d distinct claim markers",
            brand_id,
            len(raw_content or ""),
            len(display_ids),
        )
        if not display_ids:
            return unchanged

        claims = await self._load_claims(brand_id, display_ids)
        if not claims:
            log_citation_result(0, 0, display_ids, fail_open=True)
            return unchanged

        reference_ids = list(
            dict.fromkeys(ref_id for claim in claims for ref_id in claim.linked_reference_ids)
        )
        try:
            references = await self._load_references(reference_ids)
        except Exception as exc:
            logger.error("Error fetching references %s: %s", reference_ids, exc)
            log_citation_result(0, 0, display_ids, fail_open=True)
            return unchanged

        claim_map: Dict[str, ClaimRecord] = {c.display_id: c for c in claims}
        reference_map: Dict[str, ReferenceRecord] = {r.id: r for r in references}

        citation_numbers: Dict[str, int] = {}
        claims_used: List[ClaimUsage] = []
        references_used: List[ReferenceUsage] = []
        reference_index: Dict[str, ReferenceUsage] = {}

        for display_id in display_ids:
            claim = claim_map.get(display_id)
            if claim is None or display_id in citation_numbers:
                continue
            citation_numbers[display_id] = len(citation_numbers) + 1

            linked: list[str] = []
            for ref_id in claim.linked_reference_ids:
                ref = reference_map.get(ref_id)
                if ref is None:
                    continue
                if ref_id not in reference_index:
                    position = len(references_used) + 1
                    usage = ReferenceUsage(
                        reference_id=ref_id,
                        reference_display_id=ref.display_id or f"REF-{position}",
                        formatted_citation=resolve_citation_text(ref, self.citation_style),
                        citation_number=position,
                    )
                    references_used.append(usage)
                    reference_index[ref_id] = usage
                linked.append(ref.display_id or ref_id)

            claims_used.append(
                ClaimUsage(
                    claim_id=claim.id,
                    claim_display_id=claim.display_id,
                    claim_text=claim.text,
                    citation_number=citation_numbers[display_id],
                    linked_references=linked,
                )
            )

        references_used.sort(key=lambda ref: ref.citation_number)

        def _substitute(match: re.Match[str]) -> str:
            display_id = match.group(1)
            claim = claim_map.get(display_id)
            number = citation_numbers.get(display_id)
            if claim is None or number is None:
                return match.group(0)
            return render_annotation(claim.id, number)

        content = CLAIM_MARKER_PATTERN.sub(_substitute, raw_content)

        unresolved = [d for d in display_ids if d not in citation_numbers]
        if unresolved:
            logger.warning("Unresolved claim markers left in content: %s", ", ".join(unresolved))
        log_citation_result(len(claims_used), len(references_used), unresolved)
        return ProcessedContent(
            content=content,
            claims_used=claims_used,
            references_used=references_used,
        )

    async def _load_claims(self, brand_id: str, display_ids: List[str]) -> List[ClaimRecord]:
        started = time.perf_counter()
        try:
            claims = await self.store.find_claims_by_display_ids(brand_id, display_ids)
        except Exception as exc:
            logger.error("Error fetching claims %s for brand %s: %s", display_ids, brand_id, exc)
            log_store_call("claims_by_display_id", "error", error=str(exc))
            return []
        log_store_call(
            "claims_by_display_id",
            "ok",
            records=len(claims),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        if not claims:
            logger.warning(
                "No claims found for brand %s matching %s; returning content unchanged",
                brand_id,
                display_ids,
            )
        return list(claims)

    async def _load_references(self, reference_ids: List[str]) -> List[ReferenceRecord]:
        if not reference_ids:
            return []
        started = time.perf_counter()
        try:
            references = await self.store.find_references_by_ids(reference_ids)
        except Exception as exc:
            log_store_call("references_by_id", "error", error=str(exc))
            raise
        log_store_call(
            "references_by_id",
            "ok",
            records=len(references),
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return list(references)
