"""
Tests for layout and text extraction against generated PDFs.
"""
import tempfile
import unittest
from pathlib import Path

from pdfqc.core.error_handling import PDFValidationError
from pdfqc.services.layout_extractor import LayoutExtractor
from pdfqc.services.text_extractor import TextExtractor
from tests.helpers import create_blank_pdf, create_text_pdf


class ExtractionTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()


class TestLayoutExtractor(ExtractionTestCase):
    """Test cases for LayoutExtractor."""

    def test_text_spans_become_elements(self):
        pdf_path = create_text_pdf(self.tmp_dir / "text.pdf", [["First line", "Second line", "Third line"]])

        layouts = LayoutExtractor().extract(pdf_path=str(pdf_path))

        self.assertEqual(len(layouts), 1)
        page = layouts[0]
        self.assertEqual(page.page_number, 1)
        self.assertAlmostEqual(page.width, 612, places=0)
        self.assertAlmostEqual(page.height, 792, places=0)
        self.assertEqual([el.text for el in page.elements], ["First line", "Second line", "Third line"])

        for element in page.elements:
            self.assertAlmostEqual(element.x, 72, places=0)
            self.assertAlmostEqual(element.font_size, 12, places=1)
            self.assertEqual(element.page, 1)
            self.assertIsNone(element.validation_error())

        # top-left origin: later lines sit lower on the page
        ys = [el.y for el in page.elements]
        self.assertAlmostEqual(ys[1] - ys[0], 20, places=0)
        self.assertAlmostEqual(ys[2] - ys[1], 20, places=0)

    def test_extract_from_bytes(self):
        pdf_path = create_text_pdf(self.tmp_dir / "two.pdf", [["Page one"], ["Page two"]])

        layouts = LayoutExtractor().extract(pdf_bytes=pdf_path.read_bytes())

        self.assertEqual([layout.page_number for layout in layouts], [1, 2])
        self.assertEqual(layouts[1].elements[0].text, "Page two")
        self.assertEqual(layouts[1].elements[0].page, 2)

    def test_image_only_pages_have_no_elements(self):
        pdf_path = create_blank_pdf(self.tmp_dir / "blank.pdf", page_count=2)

        layouts = LayoutExtractor().extract(pdf_path=str(pdf_path))

        self.assertEqual(len(layouts), 2)
        self.assertTrue(all(layout.is_empty for layout in layouts))

    def test_invalid_pdf(self):
        with self.assertRaises(PDFValidationError):
            LayoutExtractor().extract(pdf_bytes=b"this is not a pdf")

    def test_requires_input(self):
        with self.assertRaises(ValueError):
            LayoutExtractor().extract()


class TestTextExtractor(ExtractionTestCase):
    """Test cases for TextExtractor."""

    def test_pages_joined_with_offsets(self):
        pdf_path = create_text_pdf(self.tmp_dir / "text.pdf", [["Hello world"], ["Second page"]])

        extracted = TextExtractor().extract(str(pdf_path))

        self.assertEqual(extracted.page_texts, ["Hello world", "Second page"])
        self.assertEqual(extracted.text, "Hello world\n\nSecond page")
        self.assertEqual(extracted.page_at(extracted.text.index("Second")), 2)

    def test_blank_document_is_empty(self):
        pdf_path = create_blank_pdf(self.tmp_dir / "blank.pdf")
        self.assertTrue(TextExtractor().extract(str(pdf_path)).is_empty)

    def test_missing_file(self):
        with self.assertRaises(PDFValidationError):
            TextExtractor().extract(str(self.tmp_dir / "missing.pdf"))


if __name__ == '__main__':
    unittest.main()
