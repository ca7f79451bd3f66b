"""
Alignment analyzer.

Elements are bucketed into coordinate bands (``y`` for rows, ``x`` for
columns). Members of one band are assumed to be meant to line up exactly, so
a band whose coordinates spread further than the alignment tolerance is
reported as a single issue.
"""
from typing import List

from pdfqc.models.issues import IssueType, QCIssue, severity_for_deviation
from pdfqc.models.layout import PageLayout
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.stats import group_by_band, round_half_up, union_box

# (grouping coordinate, wording used in the description)
_AXES = (("y", "horizontal"), ("x", "vertical"))


class AlignmentAnalyzer(BaseAnalyzer):
    issue_type = IssueType.ALIGNMENT

    def analyze(self, page: PageLayout) -> List[QCIssue]:
        threshold = self.thresholds.alignment
        issues: List[QCIssue] = []

        for coordinate, orientation in _AXES:
            bands = group_by_band(page.elements, coordinate, self.thresholds.alignment_band)
            for members in bands.values():
                if len(members) < 2:
                    continue

                values = [getattr(el, coordinate) for el in members]
                spread = max(values) - min(values)
                if spread <= threshold:
                    continue

                issues.append(QCIssue(
                    type=self.issue_type,
                    severity=severity_for_deviation(spread, threshold),
                    description=(
                        f"Inconsistent {orientation} alignment of text "
                        f"({round_half_up(spread)}px difference)"
                    ),
                    elements=tuple(members),
                    page=page.page_number,
                    location=union_box(members),
                    deviation=spread,
                ))

        self._log_page_result(page, issues)
        return issues
