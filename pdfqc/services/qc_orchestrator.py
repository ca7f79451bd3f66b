"""
QC orchestrator.

Runs the visual and text pipelines over a stored PDF. The two pipelines are
independent and run concurrently; their results only meet in the combined
report. Results are cached by content hash through the injected cache.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from pdfqc.core.config import settings
from pdfqc.core.error_handling import (
    AnalysisFailedError,
    ExtractionUnavailableError,
    QCServiceError,
)
from pdfqc.models.issues import VisualQCReport
from pdfqc.models.text_issues import TextAnalysisResult
from pdfqc.services.cache import InMemoryTTLCache, ResultCache, make_cache_key
from pdfqc.services.layout_extractor import LayoutExtractor
from pdfqc.services.ocr_client import MistralOCRClient
from pdfqc.services.pdf_input_handler import StoredPDF
from pdfqc.services.text_extractor import ExtractedText, TextExtractor
from pdfqc.services.text_qc import TextAnalysisService, build_text_analysis_service
from pdfqc.services.visual import QCThresholds, analyze_document

logger = logging.getLogger(__name__)

VISUAL = "visual"
TEXT = "text"


@dataclass
class QCRunResult:
    """Outcome of a combined run; a pipeline that failed has an entry in ``errors``."""

    visual: Optional[VisualQCReport] = None
    text: Optional[TextAnalysisResult] = None
    errors: Dict[str, str] = field(default_factory=dict)
    cached: Dict[str, bool] = field(default_factory=dict)


class QCOrchestrator:
    """Coordinates extraction, analysis and caching for uploaded PDFs."""

    def __init__(
        self,
        cache: Optional[ResultCache] = None,
        layout_extractor: Optional[LayoutExtractor] = None,
        text_extractor: Optional[TextExtractor] = None,
        text_service: Optional[TextAnalysisService] = None,
        ocr_client: Optional[MistralOCRClient] = None
    ):
        self.cache = cache
        self.layout_extractor = layout_extractor or LayoutExtractor()
        self.text_extractor = text_extractor or TextExtractor()
        self.text_service = text_service or build_text_analysis_service()
        self._ocr_client = ocr_client

        logger.info(
            f"QC orchestrator initialized: cache={'on' if cache is not None else 'off'}, "
            f"text_provider={self.text_service.provider.name}"
        )

    @property
    def ocr_client(self) -> Optional[MistralOCRClient]:
        """OCR fallback client, created on first use when configured."""
        if self._ocr_client is None and settings.ocr_configured:
            self._ocr_client = MistralOCRClient()
            logger.info("Mistral OCR client initialized")
        return self._ocr_client

    # ------------------------------------------------------------------
    # Visual pipeline
    # ------------------------------------------------------------------
    async def run_visual_qc(
        self,
        pdf: StoredPDF,
        thresholds: Optional[QCThresholds] = None,
        require_text_based: bool = False
    ) -> Tuple[VisualQCReport, bool]:
        """Visual layout QC for a stored PDF.

        Returns:
            Tuple of (report, served_from_cache)

        Raises:
            ExtractionUnavailableError: If ``require_text_based`` is set and the
                document has no text elements
        """
        thresholds = thresholds or QCThresholds.from_settings()
        key = make_cache_key(pdf.content_hash, VISUAL, thresholds.fingerprint())

        cached = self._cache_get(key)
        if cached is not None:
            if require_text_based and cached.is_image_based:
                raise ExtractionUnavailableError("No text elements could be extracted from the document")
            return cached, True

        layouts = await asyncio.to_thread(self.layout_extractor.extract, pdf.path)
        report = await asyncio.to_thread(analyze_document, layouts, thresholds, require_text_based)

        self._cache_set(key, report)
        return report, False

    # ------------------------------------------------------------------
    # Text pipeline
    # ------------------------------------------------------------------
    async def run_text_qc(self, pdf: StoredPDF) -> Tuple[TextAnalysisResult, bool]:
        """Text QC for a stored PDF, falling back to OCR when there is no text layer.

        Returns:
            Tuple of (result, served_from_cache)

        Raises:
            ExtractionUnavailableError: If the document has no text layer and
                OCR is not configured
            OCRError: If the OCR fallback fails
        """
        key = make_cache_key(pdf.content_hash, TEXT, self.text_service.provider.name)
        cached = self._cache_get(key)
        if cached is not None:
            return cached, True

        document = await asyncio.to_thread(self.text_extractor.extract, pdf.path)
        source = "text-layer"

        if document.is_empty:
            ocr_client = self.ocr_client
            if ocr_client is None:
                raise ExtractionUnavailableError(
                    "The document has no text layer and OCR fallback is not configured"
                )
            logger.info("No text layer found, falling back to OCR")
            ocr_result = await ocr_client.recognize(pdf.content)
            document = ExtractedText.from_pages(ocr_result.page_texts)
            source = "ocr"

        result = await self.text_service.analyze(document, source=source)
        self._cache_set(key, result)
        return result, False

    # ------------------------------------------------------------------
    # Combined
    # ------------------------------------------------------------------
    async def run_full_qc(
        self,
        pdf: StoredPDF,
        text_qc: bool = True,
        visual_qc: bool = True,
        thresholds: Optional[QCThresholds] = None
    ) -> QCRunResult:
        """Run the requested pipelines concurrently.

        A failing pipeline is reported in ``errors`` while the other still
        returns its result.

        Raises:
            ValueError: If neither pipeline is requested
            AnalysisFailedError: If every requested pipeline failed
        """
        jobs = {}
        if visual_qc:
            jobs[VISUAL] = self.run_visual_qc(pdf, thresholds)
        if text_qc:
            jobs[TEXT] = self.run_text_qc(pdf)
        if not jobs:
            raise ValueError("At least one of text QC or visual QC must be enabled")

        outcomes = await asyncio.gather(*jobs.values(), return_exceptions=True)

        run = QCRunResult()
        for name, outcome in zip(jobs, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                if isinstance(outcome, QCServiceError):
                    logger.warning(f"{name} QC failed for {pdf.filename}: {outcome}")
                else:
                    logger.error(f"{name} QC failed unexpectedly for {pdf.filename}", exc_info=outcome)
                run.errors[name] = str(outcome) or type(outcome).__name__
                continue

            result, from_cache = outcome
            run.cached[name] = from_cache
            if name == VISUAL:
                run.visual = result
            else:
                run.text = result

        if len(run.errors) == len(jobs):
            raise AnalysisFailedError(
                "; ".join(f"{name}: {message}" for name, message in run.errors.items())
            )
        return run

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------
    def _cache_get(self, key: str):
        if self.cache is None:
            return None
        value = self.cache.get(key)
        if value is not None:
            logger.info(f"Cache hit: {key}")
        return value

    def _cache_set(self, key: str, value) -> None:
        if self.cache is not None:
            self.cache.set(key, value)


# Singleton orchestrator instance
_orchestrator: Optional[QCOrchestrator] = None


def get_qc_orchestrator() -> QCOrchestrator:
    """Get singleton QC orchestrator instance.

    Returns:
        QCOrchestrator singleton instance
    """
    global _orchestrator
    if _orchestrator is None:
        cache = (
            InMemoryTTLCache(settings.CACHE_TTL_SECONDS, settings.CACHE_MAX_ENTRIES)
            if settings.CACHE_ENABLED else None
        )
        _orchestrator = QCOrchestrator(cache=cache)
    return _orchestrator
