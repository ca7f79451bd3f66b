"""
Unit tests for PDF upload validation and temporary storage.
"""
import hashlib
import tempfile
import unittest
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

from fastapi import UploadFile
from starlette.datastructures import Headers

from pdfqc.core.config import settings
from pdfqc.core.error_handling import PDFValidationError
from pdfqc.services.pdf_input_handler import PDFInputHandler
from tests.helpers import create_text_pdf


def upload(content: bytes, filename: str, content_type: str = "application/pdf") -> UploadFile:
    return UploadFile(
        file=BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestPDFInputHandler(unittest.IsolatedAsyncioTestCase):
    """Test cases for PDFInputHandler."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        pdf_path = create_text_pdf(Path(self._tmp.name) / "doc.pdf", [["One"], ["Two"]])
        self.pdf_bytes = pdf_path.read_bytes()
        self.handler = PDFInputHandler()

    async def asyncTearDown(self):
        await self.handler.cleanup()
        self._tmp.cleanup()

    async def test_save_uploaded_file(self):
        stored = await self.handler.save_uploaded_file(upload(self.pdf_bytes, "report.pdf"))

        self.assertEqual(stored.filename, "report.pdf")
        self.assertEqual(stored.page_count, 2)
        self.assertEqual(stored.content_hash, hashlib.sha256(self.pdf_bytes).hexdigest())
        self.assertTrue(Path(stored.path).exists())

    async def test_cleanup_removes_temp_files(self):
        stored = await self.handler.save_uploaded_file(upload(self.pdf_bytes, "report.pdf"))

        await self.handler.cleanup()
        await self.handler.cleanup()

        self.assertFalse(Path(stored.path).exists())

    async def test_rejects_non_pdf_name(self):
        with self.assertRaises(PDFValidationError):
            await self.handler.save_uploaded_file(upload(self.pdf_bytes, "report.docx"))

    async def test_rejects_wrong_content_type(self):
        with self.assertRaises(PDFValidationError):
            await self.handler.save_uploaded_file(upload(self.pdf_bytes, "report.pdf", "text/plain"))

    def test_rejects_non_pdf_content(self):
        with self.assertRaises(PDFValidationError):
            self.handler.save_bytes(b"plain text pretending to be a pdf", "fake.pdf")

    def test_rejects_oversized_upload(self):
        with patch.object(settings, "MAX_UPLOAD_MB", 0):
            with self.assertRaises(PDFValidationError):
                self.handler.save_bytes(self.pdf_bytes, "doc.pdf")

    def test_rejects_too_many_pages(self):
        with patch.object(settings, "MAX_PDF_PAGES", 1):
            with self.assertRaises(PDFValidationError):
                self.handler.save_bytes(self.pdf_bytes, "doc.pdf")

    def test_filename_sanitized(self):
        stored = self.handler.save_bytes(self.pdf_bytes, "../../etc/report")
        self.assertEqual(stored.filename, "report.pdf")


if __name__ == '__main__':
    unittest.main()
