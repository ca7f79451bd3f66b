"""Services package for layout extraction, visual QC, text QC, OCR fallback and caching."""

from pdfqc.services.cache import InMemoryTTLCache, ResultCache
from pdfqc.services.layout_extractor import LayoutExtractor
from pdfqc.services.pdf_input_handler import PDFInputHandler, StoredPDF
from pdfqc.services.text_extractor import ExtractedText, TextExtractor

__all__ = [
    'ExtractedText',
    'InMemoryTTLCache',
    'LayoutExtractor',
    'PDFInputHandler',
    'ResultCache',
    'StoredPDF',
    'TextExtractor',
]
