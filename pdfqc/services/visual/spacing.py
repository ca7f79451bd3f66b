"""
Spacing analyzer.

Vertical gaps between consecutive lines of the same column are collected, the
most frequent (rounded) gap is taken as the page's line spacing, and gaps that
deviate from it by more than the spacing tolerance are reported.
"""
from typing import Iterator, List, Tuple

from pdfqc.models.issues import IssueType, QCIssue, severity_for_deviation
from pdfqc.models.layout import BoundingBox, PageLayout, TextElement
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.stats import frequency_mode, round_half_up


class SpacingAnalyzer(BaseAnalyzer):
    issue_type = IssueType.SPACING

    def _stacked_pairs(
        self,
        elements: Tuple[TextElement, ...]
    ) -> Iterator[Tuple[TextElement, TextElement, float]]:
        """Yield (previous, current, gap) for vertically adjacent elements of one column.

        Pairs too far apart horizontally, overlapping, or separated by a gap
        large enough to start a new block are skipped.
        """
        ordered = sorted(elements, key=lambda el: el.y)
        for previous, current in zip(ordered, ordered[1:]):
            if abs(current.x - previous.x) > self.thresholds.spacing_column_tolerance:
                continue
            gap = current.y - previous.bbox.bottom
            if 0 < gap < self.thresholds.spacing_max_gap:
                yield previous, current, gap

    def analyze(self, page: PageLayout) -> List[QCIssue]:
        pairs = list(self._stacked_pairs(page.elements))
        if len(pairs) < self.thresholds.spacing_min_samples:
            return []

        expected = frequency_mode(round_half_up(gap) for _, _, gap in pairs)
        threshold = self.thresholds.spacing
        issues: List[QCIssue] = []

        for previous, current, gap in pairs:
            deviation = abs(gap - expected)
            if deviation <= threshold:
                continue

            issues.append(QCIssue(
                type=self.issue_type,
                severity=severity_for_deviation(deviation, threshold),
                description=(
                    f"Inconsistent spacing between text elements "
                    f"({round_half_up(gap)}px vs expected {expected}px)"
                ),
                elements=(previous, current),
                page=page.page_number,
                # the gap itself: from the bottom of previous to the top of current
                location=BoundingBox(
                    x=min(previous.x, current.x),
                    y=previous.bbox.bottom,
                    width=max(previous.width, current.width),
                    height=gap,
                ),
                deviation=deviation,
            ))

        self._log_page_result(page, issues)
        return issues
