"""
Locating text issues inside the document: sentence, paragraph, section and
surrounding characters.
"""
import bisect
import re
from typing import List, Optional

from pdfqc.core.constants import (
    CONTEXT_WINDOW_CHARS,
    MIN_SENTENCE_CONTEXT_CHARS,
    SECTION_LOOKBEHIND_CHARS,
)

SENTENCE_BOUNDARIES = ".?!"

COMMON_SECTIONS = (
    "Abstract", "Introduction", "Methods", "Results",
    "Discussion", "Conclusion", "References", "Summary",
    "Background", "Objectives", "Materials", "Methodology",
    "Findings", "Analysis", "Recommendations", "Appendix",
)

_SECTION_PATTERN = re.compile(r"\b(" + "|".join(COMMON_SECTIONS) + r")\b", re.IGNORECASE)
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def sentence_at(text: str, position: int) -> str:
    """Full sentence containing ``position``.

    Sentences end at ``.``, ``?`` or ``!``; a boundary only starts a new
    sentence when followed by a space or the end of the text. Very short
    results are widened to a fixed window around the position.
    """
    start = 0
    for index in range(position - 1, -1, -1):
        if text[index] in SENTENCE_BOUNDARIES and (index + 1 >= len(text) or text[index + 1] == " "):
            start = min(index + 2, position)
            break

    end = len(text)
    for index in range(position + 1, len(text)):
        if text[index] in SENTENCE_BOUNDARIES:
            end = index + 1
            break

    sentence = text[start:end].strip()
    if len(sentence) < MIN_SENTENCE_CONTEXT_CHARS and position + 50 < len(text):
        sentence = text[max(0, position - 30):min(len(text), position + 70)].strip()
    return sentence


class ParagraphIndex:
    """Maps character offsets to 1-based paragraph numbers (blank-line separated)."""

    def __init__(self, text: str):
        self._starts: List[int] = [0] + [m.end() for m in _PARAGRAPH_BREAK.finditer(text)]

    def paragraph_at(self, position: int) -> int:
        return max(1, bisect.bisect_right(self._starts, position))


def section_at(text: str, position: int) -> Optional[str]:
    """Nearest common section heading mentioned shortly before ``position``."""
    window = text[max(0, position - SECTION_LOOKBEHIND_CHARS):position]
    matches = list(_SECTION_PATTERN.finditer(window))
    if not matches:
        return None
    found = matches[-1].group(1).lower()
    return next(name for name in COMMON_SECTIONS if name.lower() == found)


def context_before(text: str, start: int) -> str:
    return text[max(0, start - CONTEXT_WINDOW_CHARS):start]


def context_after(text: str, end: int) -> str:
    return text[end:min(len(text), end + CONTEXT_WINDOW_CHARS)]
