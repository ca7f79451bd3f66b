"""
Unit tests for API request models.
"""
import unittest

from pydantic import ValidationError

from pdfqc.models.api_models import (
    ElementsRequest,
    TextAnalysisRequest,
    TextElementModel,
    ThresholdOverrides,
)


class TestElementsRequest(unittest.TestCase):
    """Test cases for ElementsRequest."""

    def test_to_layouts_defaults(self):
        request = ElementsRequest(pages=[
            {"elements": [{"text": "  Title  ", "x": 72, "y": 72, "width": 100, "height": 18, "font_size": 18}]},
            {"page_number": 5, "width": 595, "elements": []},
        ])

        layouts = request.to_layouts(default_width=612)

        self.assertEqual([layout.page_number for layout in layouts], [1, 5])
        self.assertEqual([layout.width for layout in layouts], [612, 595])
        element = layouts[0].elements[0]
        self.assertEqual(element.text, "Title")
        self.assertEqual(element.page, 1)

    def test_empty_pages_rejected(self):
        with self.assertRaises(ValidationError):
            ElementsRequest(pages=[])

    def test_duplicate_page_numbers_rejected(self):
        with self.assertRaises(ValidationError):
            ElementsRequest(pages=[{"page_number": 2}, {"page_number": 2}])

    def test_implicit_and_explicit_numbers_collide(self):
        with self.assertRaises(ValidationError):
            ElementsRequest(pages=[{}, {"page_number": 1}])


class TestTextElementModel(unittest.TestCase):

    def test_blank_text_is_accepted_and_flagged_later(self):
        model = TextElementModel(text="   ", x=0, y=0, width=1, height=1, font_size=12)
        element = model.to_element(page=1)

        self.assertEqual(element.text, "")
        self.assertEqual(element.validation_error(), "empty text")

    def test_negative_width_is_accepted(self):
        model = TextElementModel(text="a", x=0, y=0, width=-1, height=1, font_size=12)
        self.assertIsNotNone(model.to_element(page=1).validation_error())

    def test_non_positive_font_size_is_accepted(self):
        model = TextElementModel(text="a", x=0, y=0, width=1, height=1, font_size=0)
        self.assertIsNotNone(model.to_element(page=1).validation_error())

    def test_non_numeric_geometry_rejected(self):
        with self.assertRaises(ValidationError):
            TextElementModel(text="a", x="left", y=0, width=1, height=1, font_size=12)


class TestOtherRequests(unittest.TestCase):

    def test_threshold_overrides_must_be_positive(self):
        with self.assertRaises(ValidationError):
            ThresholdOverrides(margin=-5)
        self.assertEqual(ThresholdOverrides(margin=25).model_dump()["margin"], 25)

    def test_blank_text_analysis_request(self):
        with self.assertRaises(ValidationError):
            TextAnalysisRequest(text="\n\t ")


if __name__ == '__main__':
    unittest.main()
