"""
Plain-text extraction using pdfplumber.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import pdfplumber

from pdfqc.core.constants import PAGE_TEXT_SEPARATOR
from pdfqc.core.error_handling import PDFValidationError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedText:
    """Document text plus the offset at which each page starts."""

    page_texts: List[str]
    page_offsets: List[int] = field(default_factory=list)

    @classmethod
    def from_pages(cls, page_texts: List[str]) -> "ExtractedText":
        offsets = []
        position = 0
        for text in page_texts:
            offsets.append(position)
            position += len(text) + len(PAGE_TEXT_SEPARATOR)
        return cls(page_texts=list(page_texts), page_offsets=offsets)

    @property
    def text(self) -> str:
        return PAGE_TEXT_SEPARATOR.join(self.page_texts)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def page_at(self, offset: int) -> int:
        """1-based page holding character ``offset`` of ``text``."""
        page = 1
        for index, start in enumerate(self.page_offsets):
            if offset >= start:
                page = index + 1
            else:
                break
        return page


class TextExtractor:
    """Extracts the text layer page by page."""

    def extract(self, pdf_path: str) -> ExtractedText:
        """Extract text from every page.

        Raises:
            PDFValidationError: If the document cannot be parsed
        """
        logger.info(f"Extracting text layer with pdfplumber: {pdf_path}")
        try:
            with pdfplumber.open(pdf_path) as pdf:
                page_texts = [self._page_text(page) for page in pdf.pages]
        except Exception as e:
            logger.error(f"pdfplumber extraction failed: {e}")
            raise PDFValidationError(f"Failed to extract text from PDF: {e}") from e

        extracted = ExtractedText.from_pages(page_texts)
        logger.info(
            f"Extracted {len(extracted.text)} characters from {len(page_texts)} pages"
        )
        return extracted

    @staticmethod
    def _page_text(page) -> str:
        text: Optional[str] = page.extract_text()
        return (text or "").strip()
