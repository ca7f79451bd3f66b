"""
Tests for the QC orchestrator: pipelines, OCR fallback, caching and partial failure.
"""
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

from pdfqc.core.config import settings
from pdfqc.core.error_handling import (
    AnalysisFailedError,
    ExtractionUnavailableError,
    PDFValidationError,
)
from pdfqc.models.issues import FileType
from pdfqc.models.text_issues import OCRResult
from pdfqc.services.cache import InMemoryTTLCache
from pdfqc.services.layout_extractor import LayoutExtractor
from pdfqc.services.pdf_input_handler import PDFInputHandler
from pdfqc.services.qc_orchestrator import TEXT, VISUAL, QCOrchestrator
from pdfqc.services.text_qc import TextAnalysisService
from pdfqc.services.visual import QCThresholds
from tests.helpers import create_blank_pdf, create_text_pdf


class TestQCOrchestrator(unittest.IsolatedAsyncioTestCase):
    """Test cases for QCOrchestrator."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)
        self.handler = PDFInputHandler()
        self.cache = InMemoryTTLCache(ttl_seconds=3600)

        self._no_ocr = patch.object(settings, "MISTRAL_API_KEY", None)
        self._no_ocr.start()

    async def asyncTearDown(self):
        await self.handler.cleanup()
        self._no_ocr.stop()
        self._tmp.cleanup()

    def orchestrator(self, **kwargs) -> QCOrchestrator:
        kwargs.setdefault("cache", self.cache)
        kwargs.setdefault("text_service", TextAnalysisService())
        return QCOrchestrator(**kwargs)

    def text_pdf(self):
        path = create_text_pdf(self.tmp_dir / "text.pdf", [["We recieved the samples.", "The assay was repeated."]])
        return self.handler.save_bytes(path.read_bytes(), "text.pdf")

    def blank_pdf(self):
        path = create_blank_pdf(self.tmp_dir / "blank.pdf")
        return self.handler.save_bytes(path.read_bytes(), "blank.pdf")

    async def test_full_qc_runs_both_pipelines(self):
        pdf = self.text_pdf()

        run = await self.orchestrator().run_full_qc(pdf)

        self.assertEqual(run.errors, {})
        self.assertEqual(run.visual.file_type, FileType.TEXT_BASED)
        self.assertEqual(run.visual.text_element_count, 2)
        self.assertEqual(run.text.source, "text-layer")
        self.assertEqual([i.location.error_word for i in run.text.issues], ["recieved"])
        self.assertEqual(run.cached, {VISUAL: False, TEXT: False})

    async def test_second_run_served_from_cache(self):
        pdf = self.text_pdf()
        orchestrator = self.orchestrator()

        first = await orchestrator.run_full_qc(pdf)
        second = await orchestrator.run_full_qc(pdf)

        self.assertEqual(second.cached, {VISUAL: True, TEXT: True})
        self.assertIs(second.visual, first.visual)
        self.assertIs(second.text, first.text)

    async def test_visual_cache_is_keyed_by_thresholds(self):
        pdf = self.text_pdf()
        orchestrator = self.orchestrator()

        await orchestrator.run_visual_qc(pdf, QCThresholds())
        _, cached = await orchestrator.run_visual_qc(pdf, QCThresholds(margin=30))

        self.assertFalse(cached)

    async def test_no_cache(self):
        pdf = self.text_pdf()
        orchestrator = QCOrchestrator(cache=None, text_service=TextAnalysisService())

        await orchestrator.run_visual_qc(pdf)
        _, cached = await orchestrator.run_visual_qc(pdf)

        self.assertFalse(cached)

    async def test_image_based_without_ocr_reports_text_error(self):
        pdf = self.blank_pdf()

        run = await self.orchestrator().run_full_qc(pdf)

        self.assertTrue(run.visual.is_image_based)
        self.assertIsNone(run.text)
        self.assertIn("OCR", run.errors[TEXT])

    async def test_image_based_uses_ocr_fallback(self):
        pdf = self.blank_pdf()
        ocr_client = Mock()
        ocr_client.recognize = AsyncMock(return_value=OCRResult(
            text="We recieved it.",
            confidence=None,
            page_texts=["We recieved it."],
        ))

        result, cached = await self.orchestrator(ocr_client=ocr_client).run_text_qc(pdf)

        ocr_client.recognize.assert_awaited_once_with(pdf.content)
        self.assertFalse(cached)
        self.assertEqual(result.source, "ocr")
        self.assertEqual(result.content, "We recieved it.")
        self.assertEqual(len(result.issues), 1)

    async def test_require_text_based_applies_to_cached_report(self):
        pdf = self.blank_pdf()
        orchestrator = self.orchestrator()

        report, _ = await orchestrator.run_visual_qc(pdf)
        self.assertTrue(report.is_image_based)

        with self.assertRaises(ExtractionUnavailableError):
            await orchestrator.run_visual_qc(pdf, require_text_based=True)

    async def test_visual_failure_keeps_text_result(self):
        pdf = self.text_pdf()
        layout_extractor = Mock(spec=LayoutExtractor)
        layout_extractor.extract.side_effect = PDFValidationError("broken page tree")

        run = await self.orchestrator(layout_extractor=layout_extractor).run_full_qc(pdf)

        self.assertIsNone(run.visual)
        self.assertIsNotNone(run.text)
        self.assertEqual(run.errors, {VISUAL: "broken page tree"})

    async def test_all_pipelines_failed(self):
        pdf = self.blank_pdf()
        layout_extractor = Mock(spec=LayoutExtractor)
        layout_extractor.extract.side_effect = PDFValidationError("broken page tree")

        with self.assertRaises(AnalysisFailedError):
            await self.orchestrator(layout_extractor=layout_extractor).run_full_qc(pdf)

    async def test_nothing_requested(self):
        pdf = self.text_pdf()
        with self.assertRaises(ValueError):
            await self.orchestrator().run_full_qc(pdf, text_qc=False, visual_qc=False)

    async def test_only_visual_requested(self):
        pdf = self.text_pdf()

        run = await self.orchestrator().run_full_qc(pdf, text_qc=False)

        self.assertIsNotNone(run.visual)
        self.assertIsNone(run.text)
        self.assertEqual(run.errors, {})


if __name__ == '__main__':
    unittest.main()
