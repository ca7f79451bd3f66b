"""
Base visual analyzer.

This module provides the abstract base class for the page-scoped layout
analyzers, establishing a consistent interface for the aggregator.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence
import logging

from pdfqc.models.issues import IssueType, QCIssue
from pdfqc.models.layout import PageLayout
from pdfqc.services.visual.thresholds import QCThresholds

logger = logging.getLogger(__name__)


class BaseAnalyzer(ABC):
    """Abstract base class for all visual analyzers.

    Each analyzer inspects one page and reports one kind of defect:
    - Alignment (elements sharing a line or column band)
    - Spacing (vertical gaps inside a text column)
    - Margin (unique offsets from the page edges)
    - Typography (font-size outliers per text-length class)

    Analyzers hold no per-page state; ``analyze`` is a pure function of the
    page and the thresholds.
    """

    issue_type: IssueType

    def __init__(self, thresholds: QCThresholds):
        self.thresholds = thresholds

    @abstractmethod
    def analyze(self, page: PageLayout) -> List[QCIssue]:
        """Analyze one page.

        Args:
            page: Page layout holding only valid elements

        Returns:
            Issues found on the page, in detection order
        """
        pass

    def _log_page_result(self, page: PageLayout, issues: Sequence[QCIssue]):
        if issues:
            logger.debug(
                f"{self.issue_type.value} analyzer: page={page.page_number}, "
                f"elements={len(page.elements)}, issues={len(issues)}"
            )
