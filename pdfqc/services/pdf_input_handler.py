"""
PDF input handler for uploaded files.

Validates uploads, saves them to temporary files, and provides cleanup
functionality for temporary files.
"""
import hashlib
import logging
import tempfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from fastapi import UploadFile
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from pdfqc.core.config import settings
from pdfqc.core.error_handling import FileEncodingError, PDFValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredPDF:
    """Validated upload saved to disk."""

    path: str
    filename: str
    content: bytes
    content_hash: str
    """SHA-256 hex digest of ``content``."""

    page_count: int


class PDFInputHandler:
    """Handles PDF file input operations."""

    def __init__(self):
        self.temp_files: list[str] = []
        logger.debug("PDFInputHandler initialized")

    async def save_uploaded_file(self, file: UploadFile) -> StoredPDF:
        """Validate an upload and save it to a temporary location.

        Args:
            file: UploadFile from FastAPI

        Returns:
            StoredPDF describing the saved file

        Raises:
            PDFValidationError: If the upload is not an acceptable PDF
            FileEncodingError: If the file cannot be written
        """
        if not file.filename or not file.filename.lower().endswith('.pdf'):
            raise PDFValidationError("Only PDF files are supported")
        if file.content_type not in {"application/pdf", "application/octet-stream", None}:
            raise PDFValidationError("Invalid content type; only application/pdf is allowed")

        safe_filename = self._sanitize_filename(file.filename)
        content = await file.read()
        return self.save_bytes(content, safe_filename)

    def save_bytes(self, content: bytes, filename: str = "document.pdf") -> StoredPDF:
        """Validate raw PDF bytes and save them to a temporary file."""
        safe_filename = self._sanitize_filename(filename)
        self._enforce_size_limit(len(content))
        if not content.startswith(b"%PDF"):
            raise PDFValidationError("Uploaded content is not a PDF")

        page_count = self._count_pages(content)

        try:
            with tempfile.NamedTemporaryFile(delete=False, suffix='.pdf') as tmp_file:
                tmp_file.write(content)
                tmp_file_path = tmp_file.name
        except OSError as e:
            logger.error(f"Failed to save uploaded file: {e}")
            raise FileEncodingError(f"Failed to save uploaded file: {e}") from e

        self.temp_files.append(tmp_file_path)
        logger.info(f"Saved uploaded file: {safe_filename} ({len(content)} bytes, {page_count} pages)")

        return StoredPDF(
            path=tmp_file_path,
            filename=safe_filename,
            content=content,
            content_hash=hashlib.sha256(content).hexdigest(),
            page_count=page_count,
        )

    async def cleanup(self):
        """Clean up all temporary files created by this handler.

        Safe to call multiple times.
        """
        if not self.temp_files:
            return

        logger.info(f"Cleaning up {len(self.temp_files)} temporary files")

        for file_path in self.temp_files:
            try:
                Path(file_path).unlink(missing_ok=True)
                logger.debug(f"Deleted temporary file: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete temporary file {file_path}: {e}")

        self.temp_files.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _sanitize_filename(self, filename: str) -> str:
        """Strip path components and control characters from filenames."""
        safe_name = Path(filename).name
        safe_name = "".join(ch for ch in safe_name if ch.isprintable())
        if not safe_name.lower().endswith(".pdf"):
            safe_name = f"{safe_name}.pdf"
        return safe_name

    def _enforce_size_limit(self, size_bytes: int):
        max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
        if size_bytes > max_bytes:
            raise PDFValidationError(
                f"PDF exceeds max allowed size of {settings.MAX_UPLOAD_MB} MB"
            )

    def _count_pages(self, content: bytes) -> int:
        try:
            page_count = len(PdfReader(BytesIO(content)).pages)
        except (PdfReadError, ValueError) as e:
            raise PDFValidationError(f"Unable to read PDF: {e}") from e

        if page_count > settings.MAX_PDF_PAGES:
            raise PDFValidationError(
                f"PDF has {page_count} pages; the maximum is {settings.MAX_PDF_PAGES}"
            )
        return page_count
