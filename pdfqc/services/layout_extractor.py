"""
Layout extraction using PyMuPDF.

Turns every text span of every page into a ``TextElement``. PyMuPDF already
reports span boxes in top-left-origin page coordinates, which is the
coordinate system the visual analyzers expect.
"""
import logging
from typing import List, Optional

import fitz  # PyMuPDF

from pdfqc.core.error_handling import PDFValidationError
from pdfqc.models.layout import PageLayout, TextElement

logger = logging.getLogger(__name__)

# get_text("dict") block type for text (1 is image)
_TEXT_BLOCK = 0


class LayoutExtractor:
    """Extracts positioned text runs from PDF pages."""

    def extract(self, pdf_path: Optional[str] = None, pdf_bytes: Optional[bytes] = None) -> List[PageLayout]:
        """Extract the layout of every page.

        Args:
            pdf_path: Path to the PDF file
            pdf_bytes: PDF content (used instead of ``pdf_path`` when given)

        Returns:
            One PageLayout per page, in page order. Image-only pages have no elements.

        Raises:
            PDFValidationError: If the document cannot be opened
        """
        if pdf_path is None and pdf_bytes is None:
            raise ValueError("Either pdf_path or pdf_bytes must be provided")

        try:
            document = fitz.open(stream=pdf_bytes, filetype="pdf") if pdf_bytes is not None else fitz.open(pdf_path)
        except RuntimeError as e:  # FileDataError and EmptyFileError subclass it
            raise PDFValidationError(f"Unable to open PDF: {e}") from e

        try:
            layouts = [self.extract_page(page, index + 1) for index, page in enumerate(document)]
        finally:
            document.close()

        element_count = sum(len(layout.elements) for layout in layouts)
        logger.info(f"Extracted {element_count} text elements from {len(layouts)} pages")
        return layouts

    def extract_page(self, page: "fitz.Page", page_number: int) -> PageLayout:
        elements = []
        content = page.get_text("dict")
        for block in content.get("blocks", []):
            if block.get("type") != _TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    element = self._span_to_element(span, page_number)
                    if element is not None:
                        elements.append(element)

        return PageLayout(
            page_number=page_number,
            width=page.rect.width,
            height=page.rect.height,
            elements=tuple(elements),
        )

    def _span_to_element(self, span: dict, page_number: int) -> Optional[TextElement]:
        text = span.get("text", "").strip()
        if not text:
            return None

        x0, y0, x1, y1 = span["bbox"]
        return TextElement(
            text=text,
            x=x0,
            y=y0,
            width=abs(x1 - x0),
            height=abs(y1 - y0),
            font_size=span.get("size", 0.0),
            page=page_number,
            font_family=span.get("font") or None,
        )
