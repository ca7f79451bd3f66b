"""
Document-level visual QC.

``analyze_document`` validates the incoming elements, runs every analyzer on
every page, and assembles a ``VisualQCReport``. Issues are ordered by page and,
within a page, by analyzer in ``ANALYZER_ORDER``.

A failing analyzer never aborts the document: its contribution for that page
is dropped, logged, and recorded in ``report.failures``.
"""
from typing import List, Optional, Sequence, Tuple, Type, Union
import logging

from pdfqc.core.constants import IMAGE_BASED_MESSAGE
from pdfqc.core.error_handling import ExtractionUnavailableError
from pdfqc.models.issues import AnalyzerFailure, FileType, QCIssue, VisualQCReport
from pdfqc.models.layout import PageLayout, TextElement
from pdfqc.services.visual.alignment import AlignmentAnalyzer
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.margin import MarginAnalyzer
from pdfqc.services.visual.spacing import SpacingAnalyzer
from pdfqc.services.visual.thresholds import QCThresholds
from pdfqc.services.visual.typography import TypographyAnalyzer

logger = logging.getLogger(__name__)

ANALYZER_ORDER: Tuple[Type[BaseAnalyzer], ...] = (
    AlignmentAnalyzer,
    SpacingAnalyzer,
    MarginAnalyzer,
    TypographyAnalyzer,
)

PageInput = Union[PageLayout, Sequence[TextElement]]


def _sanitize_page(page_number: int, elements: Sequence[TextElement]) -> Tuple[Tuple[TextElement, ...], int]:
    """Drop malformed elements; returns (valid elements, skipped count)."""
    valid = []
    skipped = 0
    for element in elements:
        reason = element.validation_error()
        if reason is None and element.page != page_number:
            reason = f"belongs to page {element.page}"
        if reason is not None:
            skipped += 1
            logger.warning(f"Skipping text element on page {page_number}: {reason}")
            continue
        valid.append(element)
    return tuple(valid), skipped


def _normalize_pages(
    pages: Sequence[PageInput],
    default_width: float
) -> Tuple[List[PageLayout], int]:
    normalized = []
    skipped_total = 0
    for index, page in enumerate(pages, start=1):
        if isinstance(page, PageLayout):
            page_number, width, height, elements = page.page_number, page.width, page.height, page.elements
        else:
            page_number, width, height, elements = index, default_width, 0.0, page

        valid, skipped = _sanitize_page(page_number, elements)
        skipped_total += skipped
        normalized.append(PageLayout(page_number=page_number, width=width, height=height, elements=valid))

    # pages may arrive out of order; issues are reported in page order
    normalized.sort(key=lambda p: p.page_number)
    return normalized, skipped_total


def analyze_page(
    page: PageLayout,
    analyzers: Sequence[BaseAnalyzer]
) -> Tuple[List[QCIssue], List[AnalyzerFailure]]:
    """Run ``analyzers`` on one page, isolating failures per analyzer."""
    issues: List[QCIssue] = []
    failures: List[AnalyzerFailure] = []
    for analyzer in analyzers:
        try:
            issues.extend(analyzer.analyze(page))
        except Exception as e:
            logger.exception(
                f"{analyzer.issue_type.value} analyzer failed on page {page.page_number}; "
                f"continuing without its issues"
            )
            failures.append(AnalyzerFailure(
                page=page.page_number,
                analyzer=analyzer.issue_type,
                error=str(e) or type(e).__name__,
            ))
    return issues, failures


def analyze_document(
    pages: Sequence[PageInput],
    thresholds: Optional[QCThresholds] = None,
    require_text_based: bool = False,
) -> VisualQCReport:
    """Analyze every page of a document for visual layout issues.

    Args:
        pages: One entry per page, either a ``PageLayout`` or a bare list of
            elements (page number taken from the position, page width from
            ``thresholds.default_page_width``)
        thresholds: Tolerances to apply (defaults from settings)
        require_text_based: Raise instead of returning an image-based report
            when no page has any usable text element

    Returns:
        VisualQCReport with issues, summary, page count and file type

    Raises:
        ExtractionUnavailableError: If ``require_text_based`` is set and the
            document has no text elements
    """
    thresholds = thresholds or QCThresholds.from_settings()
    layouts, skipped = _normalize_pages(pages, thresholds.default_page_width)
    element_count = sum(len(p.elements) for p in layouts)

    if element_count == 0:
        if require_text_based:
            raise ExtractionUnavailableError(
                f"No text elements could be extracted from any of {len(layouts)} page(s)"
            )
        logger.info(f"No text elements on {len(layouts)} page(s); treating document as image-based")
        return VisualQCReport(
            issues=[],
            page_count=len(layouts),
            file_type=FileType.IMAGE_BASED,
            text_element_count=0,
            message=IMAGE_BASED_MESSAGE,
            skipped_elements=skipped,
        )

    analyzers = [analyzer_cls(thresholds) for analyzer_cls in ANALYZER_ORDER]
    issues: List[QCIssue] = []
    failures: List[AnalyzerFailure] = []
    for layout in layouts:
        page_issues, page_failures = analyze_page(layout, analyzers)
        issues.extend(page_issues)
        failures.extend(page_failures)

    report = VisualQCReport(
        issues=issues,
        page_count=len(layouts),
        file_type=FileType.TEXT_BASED,
        text_element_count=element_count,
        failures=failures,
        skipped_elements=skipped,
    )
    logger.info(
        f"Visual QC complete: pages={report.page_count}, elements={element_count}, "
        f"issues={len(issues)}, failures={len(failures)}, skipped={skipped}"
    )
    return report
