"""
Margin analyzer.

An element close to a page edge is only a problem when no other element on the
page shares its offset: a page set entirely at a narrow margin is consistent,
one stray line hugging the edge is not.
"""
from typing import Callable, List, Optional

from pdfqc.models.issues import IssueType, QCIssue, Severity
from pdfqc.models.layout import PageLayout, TextElement
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.stats import round_half_up


class MarginAnalyzer(BaseAnalyzer):
    issue_type = IssueType.MARGIN

    def analyze(self, page: PageLayout) -> List[QCIssue]:
        page_width = page.width if page.width > 0 else self.thresholds.default_page_width

        issues: List[QCIssue] = []
        for index, element in enumerate(page.elements):
            for edge, offset_of in (
                ("left", lambda el: el.x),
                ("right", lambda el: page_width - el.bbox.right),
            ):
                issue = self._check_edge(page, index, element, edge, offset_of)
                if issue is not None:
                    issues.append(issue)

        self._log_page_result(page, issues)
        return issues

    def _check_edge(
        self,
        page: PageLayout,
        index: int,
        element: TextElement,
        edge: str,
        offset_of: Callable[[TextElement], float],
    ) -> Optional[QCIssue]:
        threshold = self.thresholds.margin
        offset = offset_of(element)
        if offset >= threshold:
            return None

        # compared by position so identical duplicates still count as peers
        has_peer = any(
            abs(offset_of(other) - offset) <= threshold / 2
            for other_index, other in enumerate(page.elements)
            if other_index != index
        )
        if has_peer:
            return None

        return QCIssue(
            type=self.issue_type,
            severity=Severity.HIGH if offset < threshold / 2 else Severity.MEDIUM,
            description=f"Inconsistent {edge} margin ({round_half_up(offset)}px from edge)",
            elements=(element,),
            page=page.page_number,
            location=element.bbox,
            deviation=offset,
        )
