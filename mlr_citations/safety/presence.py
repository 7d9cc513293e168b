"""Detect whether a regulatory safety statement appears in content.

Two tiers: an exact (case-insensitive) phrase match, then a fallback that
looks for any run of three significant words from the phrase. Statement
text is often lightly edited when placed into promotional copy, so the
fallback tolerates small insertions while still requiring a meaningful
shared run of words.
"""

from __future__ import annotations

import re
from typing import List

from mlr_citations.models import PresenceResult

_PHRASE_SPLIT = re.compile(r"[.,;:\n]")

MIN_PHRASE_LENGTH = 15  # phrases must be strictly longer than this
MIN_WORD_LENGTH = 3  # words must be strictly longer than this
WINDOW_SIZE = 3


def candidate_phrases(statement_text: str) -> List[str]:
    phrases = (p.strip() for p in _PHRASE_SPLIT.split(statement_text or ""))
    return [p for p in phrases if len(p) > MIN_PHRASE_LENGTH]


def _window_match(phrase: str, lowered_content: str) -> str | None:
    words = [w for w in phrase.lower().split() if len(w) > MIN_WORD_LENGTH]
    if len(words) < WINDOW_SIZE:
        return None
    for start in range(len(words) - WINDOW_SIZE + 1):
        window = " ".join(words[start : start + WINDOW_SIZE])
        if window in lowered_content:
            return window
    return None


def check_presence(statement_text: str, content: str) -> PresenceResult:
    """Return whether statement_text is present in content, and which phrases matched."""
    if not statement_text or not content:
        return PresenceResult()

    lowered_content = content.lower()
    matched: list[str] = []
    for phrase in candidate_phrases(statement_text):
        if phrase.lower() in lowered_content:
            matched.append(phrase)
            continue
        window = _window_match(phrase, lowered_content)
        if window is not None:
            matched.append(window)

    matched = list(dict.fromkeys(matched))
    return PresenceResult(is_present=bool(matched), matched_phrases=matched)
