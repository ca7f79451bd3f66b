"""
PDF quality-control API endpoints.

Visual layout QC, text QC, and the combined report. PDFs are accepted as
multipart uploads; pre-extracted text elements and plain text as JSON.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from pdfqc.core.config import settings
from pdfqc.core.error_handling import handle_qc_errors
from pdfqc.core.security import verify_api_key
from pdfqc.models.api_models import (
    ElementsRequest,
    QCReportResponse,
    TextAnalysisRequest,
    TextAnalysisResponse,
    ThresholdOverrides,
    VisualQCResponse,
)
from pdfqc.services.pdf_input_handler import PDFInputHandler
from pdfqc.services.qc_orchestrator import get_qc_orchestrator
from pdfqc.services.response_builder import ResponseBuilder
from pdfqc.services.visual import QCThresholds, analyze_document

logger = logging.getLogger(__name__)
router = APIRouter()


def threshold_overrides(
    alignment_threshold: Optional[float] = Query(None, gt=0, description="Alignment tolerance"),
    spacing_threshold: Optional[float] = Query(None, gt=0, description="Spacing tolerance"),
    margin_threshold: Optional[float] = Query(None, gt=0, description="Margin tolerance"),
    font_size_threshold: Optional[float] = Query(None, gt=0, description="Font size tolerance (pt)"),
) -> ThresholdOverrides:
    return ThresholdOverrides(
        alignment=alignment_threshold,
        spacing=spacing_threshold,
        margin=margin_threshold,
        font_size=font_size_threshold,
    )


def resolve_thresholds(overrides: ThresholdOverrides) -> QCThresholds:
    return QCThresholds.from_settings().with_overrides(**overrides.model_dump())


def _require_enabled(enabled: bool, feature: str):
    if not enabled:
        raise HTTPException(status_code=403, detail=f"{feature} is disabled on this server")


@router.post("/visual-qc", response_model=VisualQCResponse, dependencies=[Depends(verify_api_key)])
@handle_qc_errors("Failed to run visual QC")
async def visual_qc(
    file: UploadFile = File(...),
    require_text_based: bool = False,
    overrides: ThresholdOverrides = Depends(threshold_overrides)
):
    """
    Detect visual layout issues in an uploaded PDF.

    Checks alignment, line spacing, margins, and font size consistency on every
    page. Image-only documents are reported as "image-based" with no issues
    unless ``require_text_based`` is set, in which case the request fails with 422.
    """
    _require_enabled(settings.ENABLE_VISUAL_QC, "Visual QC")
    pdf_handler = PDFInputHandler()
    orchestrator = get_qc_orchestrator()

    try:
        pdf = await pdf_handler.save_uploaded_file(file)
        logger.info(f"Running visual QC on {pdf.filename} ({pdf.page_count} pages)")

        report, cached = await orchestrator.run_visual_qc(
            pdf,
            thresholds=resolve_thresholds(overrides),
            require_text_based=require_text_based
        )
        return ResponseBuilder().build_visual_response(report, pdf.filename, cached)

    finally:
        await pdf_handler.cleanup()


@router.post("/visual-qc/elements", response_model=VisualQCResponse, dependencies=[Depends(verify_api_key)])
@handle_qc_errors("Failed to run visual QC on text elements")
async def visual_qc_elements(request: ElementsRequest):
    """
    Detect visual layout issues in text elements extracted elsewhere.

    Each page lists positioned text runs; page numbers default to list
    position and page width to the configured default.
    """
    _require_enabled(settings.ENABLE_VISUAL_QC, "Visual QC")
    thresholds = resolve_thresholds(request.thresholds)
    layouts = request.to_layouts(thresholds.default_page_width)

    report = await asyncio.to_thread(
        analyze_document, layouts, thresholds, request.require_text_based
    )
    return ResponseBuilder().build_visual_response(report)


@router.post("/analyze-text", response_model=TextAnalysisResponse, dependencies=[Depends(verify_api_key)])
@handle_qc_errors("Failed to analyze text")
async def analyze_text(request: TextAnalysisRequest):
    """
    Find spelling, grammar, and style issues in plain text.

    Issues are sorted by position and carry the sentence, paragraph, section
    and surrounding text they were found in.
    """
    _require_enabled(settings.ENABLE_TEXT_QC, "Text QC")
    orchestrator = get_qc_orchestrator()
    result = await orchestrator.text_service.analyze_text(request.text)
    return ResponseBuilder().build_text_response(result)


@router.post("/analyze", response_model=QCReportResponse, dependencies=[Depends(verify_api_key)])
@handle_qc_errors("Failed to analyze PDF")
async def analyze_pdf(
    file: UploadFile = File(...),
    text_qc: bool = True,
    visual_qc: bool = True,
    overrides: ThresholdOverrides = Depends(threshold_overrides)
):
    """
    Full QC report for an uploaded PDF: text issues and visual layout issues.

    Both analyses run concurrently. If one of them fails, the other's result
    is still returned and the failure is listed under ``errors``.
    """
    run_text = text_qc and settings.ENABLE_TEXT_QC
    run_visual = visual_qc and settings.ENABLE_VISUAL_QC
    pdf_handler = PDFInputHandler()
    orchestrator = get_qc_orchestrator()

    try:
        pdf = await pdf_handler.save_uploaded_file(file)
        logger.info(
            f"Running QC on {pdf.filename}: text={run_text}, visual={run_visual}"
        )

        run = await orchestrator.run_full_qc(
            pdf,
            text_qc=run_text,
            visual_qc=run_visual,
            thresholds=resolve_thresholds(overrides)
        )
        return ResponseBuilder().build_report_response(pdf, run)

    finally:
        await pdf_handler.cleanup()
