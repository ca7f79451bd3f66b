"""
Response builder for QC endpoints.

Maps domain results onto the Pydantic response models.
"""
import logging
from typing import Optional

from pdfqc.models.api_models import (
    QCReportResponse,
    SummaryModel,
    TextAnalysisResponse,
    VisualQCResponse,
)
from pdfqc.models.issues import VisualQCReport
from pdfqc.models.text_issues import TextAnalysisResult
from pdfqc.services.pdf_input_handler import StoredPDF
from pdfqc.services.qc_orchestrator import QCRunResult, TEXT, VISUAL

logger = logging.getLogger(__name__)


class ResponseBuilder:
    """Builds responses for QC endpoints."""

    def build_visual_response(
        self,
        report: VisualQCReport,
        filename: Optional[str] = None,
        cached: bool = False
    ) -> VisualQCResponse:
        data = report.to_dict()
        return VisualQCResponse(
            filename=filename,
            issues=data["issues"],
            summary=SummaryModel(**data["summary"]),
            page_count=report.page_count,
            file_type=report.file_type.value,
            text_element_count=report.text_element_count,
            message=report.message,
            failures=data["failures"],
            skipped_elements=report.skipped_elements,
            cached=cached,
        )

    def build_text_response(self, result: TextAnalysisResult) -> TextAnalysisResponse:
        return TextAnalysisResponse(**result.to_dict())

    def build_report_response(self, pdf: StoredPDF, run: QCRunResult) -> QCReportResponse:
        """Combined report; pipelines that failed are listed in ``errors``."""
        response = QCReportResponse(
            filename=pdf.filename,
            content_hash=pdf.content_hash,
            page_count=pdf.page_count,
            text_analysis=self.build_text_response(run.text) if run.text else None,
            visual_analysis=(
                self.build_visual_response(run.visual, pdf.filename, run.cached.get(VISUAL, False))
                if run.visual else None
            ),
            errors=dict(run.errors),
        )
        logger.info(
            f"Built QC report for {pdf.filename}: "
            f"text={'ok' if run.text else run.errors.get(TEXT, 'skipped')}, "
            f"visual={'ok' if run.visual else run.errors.get(VISUAL, 'skipped')}"
        )
        return response
