"""
Typography analyzer.

Text length stands in for the role of a run (labels, headings, body), and runs
of one role are expected to share a font size. Only font size is compared; no
typeface recognition is attempted.
"""
from typing import List

from pdfqc.models.issues import IssueType, QCIssue, severity_for_deviation
from pdfqc.models.layout import PageLayout, TextElement
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.stats import frequency_mode, round_half_up


class TypographyAnalyzer(BaseAnalyzer):
    issue_type = IssueType.TYPOGRAPHY

    def _length_buckets(self, elements) -> List[List[TextElement]]:
        short_max = self.thresholds.short_text_max
        long_min = self.thresholds.long_text_min
        return [
            [el for el in elements if len(el.text) < short_max],
            [el for el in elements if short_max <= len(el.text) < long_min],
            [el for el in elements if len(el.text) >= long_min],
        ]

    def analyze(self, page: PageLayout) -> List[QCIssue]:
        threshold = self.thresholds.font_size
        issues: List[QCIssue] = []

        for bucket in self._length_buckets(page.elements):
            if len(bucket) < 2:
                continue

            common = frequency_mode(round_half_up(el.font_size) for el in bucket)
            for element in bucket:
                size = round_half_up(element.font_size)
                deviation = abs(size - common)
                relative = deviation / common if common else float("inf")
                if deviation <= threshold or relative <= self.thresholds.font_size_relative:
                    continue

                issues.append(QCIssue(
                    type=self.issue_type,
                    severity=severity_for_deviation(deviation, threshold),
                    description=f"Inconsistent font size ({size}pt vs common {common}pt)",
                    elements=(element,),
                    page=page.page_number,
                    location=element.bbox,
                    deviation=float(deviation),
                ))

        self._log_page_result(page, issues)
        return issues
