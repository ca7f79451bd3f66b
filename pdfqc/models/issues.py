"""
Visual QC issue models.

``QCIssue`` is tagged by ``IssueType``; consumers that bucket issues iterate
over the enum so that every issue type is always accounted for.
"""
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pdfqc.core.constants import FILE_TYPE_IMAGE_BASED, FILE_TYPE_TEXT_BASED
from pdfqc.models.layout import BoundingBox, TextElement


class IssueType(str, Enum):
    """Kind of visual defect; also the analyzer that produced it."""

    ALIGNMENT = "alignment"
    SPACING = "spacing"
    MARGIN = "margin"
    TYPOGRAPHY = "typography"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FileType(str, Enum):
    TEXT_BASED = FILE_TYPE_TEXT_BASED
    IMAGE_BASED = FILE_TYPE_IMAGE_BASED


def severity_for_deviation(deviation: float, threshold: float) -> Severity:
    """Severity shared by the deviation-based analyzers.

    Callers only invoke this for deviations already above ``threshold``.
    """
    return Severity.HIGH if deviation > threshold * 2 else Severity.MEDIUM


@dataclass(frozen=True)
class QCIssue:
    """One detected visual defect."""

    type: IssueType
    severity: Severity
    description: str
    """Human-readable, includes measured and expected values."""

    elements: Tuple[TextElement, ...]
    """Offending elements, never empty."""

    page: int
    location: BoundingBox

    deviation: float
    """Magnitude the severity was derived from (spread, gap delta, offset, size delta)."""

    def __post_init__(self):
        if not self.elements:
            raise ValueError("QCIssue requires at least one element")
        stray = [el.page for el in self.elements if el.page != self.page]
        if stray:
            raise ValueError(f"QCIssue on page {self.page} references elements from pages {sorted(set(stray))}")

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "elements": [el.to_dict() for el in self.elements],
            "page": self.page,
            "location": self.location.to_dict(),
            "deviation": self.deviation,
        }


@dataclass(frozen=True)
class AnalysisSummary:
    """Aggregate issue counts, always derived from an issue list."""

    total_issues: int
    by_type: Dict[str, int]
    by_severity: Dict[str, int]
    by_page: Dict[int, int]

    @classmethod
    def from_issues(cls, issues: Sequence[QCIssue]) -> "AnalysisSummary":
        type_counts = Counter(issue.type for issue in issues)
        severity_counts = Counter(issue.severity for issue in issues)
        page_counts = Counter(issue.page for issue in issues)
        return cls(
            total_issues=len(issues),
            by_type={t.value: type_counts.get(t, 0) for t in IssueType},
            by_severity={s.value: severity_counts.get(s, 0) for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)},
            by_page={page: page_counts[page] for page in sorted(page_counts)},
        )

    def to_dict(self) -> dict:
        return {
            "total_issues": self.total_issues,
            "by_type": dict(self.by_type),
            "by_severity": dict(self.by_severity),
            "by_page": dict(self.by_page),
        }


@dataclass(frozen=True)
class AnalyzerFailure:
    """An analyzer that raised on a page and was skipped."""

    page: int
    analyzer: IssueType
    error: str


@dataclass
class VisualQCReport:
    """Result of analyzing every page of a document."""

    issues: List[QCIssue]
    page_count: int
    file_type: FileType
    text_element_count: int = 0
    message: Optional[str] = None
    failures: List[AnalyzerFailure] = field(default_factory=list)
    skipped_elements: int = 0

    @property
    def summary(self) -> AnalysisSummary:
        """Recomputed on every access so it can never drift from ``issues``."""
        return AnalysisSummary.from_issues(self.issues)

    @property
    def is_image_based(self) -> bool:
        return self.file_type is FileType.IMAGE_BASED

    def to_dict(self) -> dict:
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": self.summary.to_dict(),
            "page_count": self.page_count,
            "file_type": self.file_type.value,
            "text_element_count": self.text_element_count,
            "message": self.message,
            "failures": [
                {"page": f.page, "analyzer": f.analyzer.value, "error": f.error}
                for f in self.failures
            ],
            "skipped_elements": self.skipped_elements,
        }
