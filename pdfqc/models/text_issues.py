"""
Text QC models: raw provider output and annotated issues.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class TextIssueType(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    STYLE = "style"


@dataclass(frozen=True)
class RawTextIssue:
    """Issue as reported by a text QC provider, before annotation."""

    type: TextIssueType
    description: str
    start: int
    end: int
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class TextIssueLocation:
    """Where an issue sits in the document text."""

    start: int
    end: int
    page: int
    paragraph: int
    section: Optional[str] = None
    full_sentence: str = ""
    error_word: str = ""
    context_before: str = ""
    context_after: str = ""


@dataclass(frozen=True)
class TextIssue:
    """Annotated spelling, grammar, or style issue."""

    type: TextIssueType
    description: str
    location: TextIssueLocation
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        loc = self.location
        return {
            "type": self.type.value,
            "description": self.description,
            "suggestion": self.suggestion,
            "location": {
                "start": loc.start,
                "end": loc.end,
                "page": loc.page,
                "paragraph": loc.paragraph,
                "section": loc.section,
                "full_sentence": loc.full_sentence,
                "error_word": loc.error_word,
                "context_before": loc.context_before,
                "context_after": loc.context_after,
            },
        }


@dataclass(frozen=True)
class OCRResult:
    """Text recognized from an image-only document."""

    text: str
    confidence: Optional[float]
    """0-100 when the engine reports one."""

    page_texts: List[str] = field(default_factory=list)


@dataclass
class TextAnalysisResult:
    """Outcome of the text QC pipeline."""

    content: str
    issues: List[TextIssue]
    provider: str
    error: Optional[str] = None
    source: str = "text-layer"
    """Where the analyzed text came from: "text-layer", "ocr", or "request"."""

    @property
    def issue_stats(self) -> Dict[str, int]:
        return {t.value: sum(1 for i in self.issues if i.type is t) for t in TextIssueType}

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "issues": [issue.to_dict() for issue in self.issues],
            "issue_stats": self.issue_stats,
            "provider": self.provider,
            "source": self.source,
            "error": self.error,
        }
