"""
Shared builders for test data.
"""
from pathlib import Path
from typing import Iterable, List, Sequence

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from pdfqc.models.layout import PageLayout, TextElement


def make_element(
    text: str = "Body text",
    x: float = 72.0,
    y: float = 100.0,
    width: float = 200.0,
    height: float = 12.0,
    font_size: float = 12.0,
    page: int = 1,
    font_family: str = "Helvetica",
) -> TextElement:
    return TextElement(
        text=text,
        x=x,
        y=y,
        width=width,
        height=height,
        font_size=font_size,
        page=page,
        font_family=font_family,
    )


def make_page(elements: Iterable[TextElement], page_number: int = 1, width: float = 612.0, height: float = 792.0) -> PageLayout:
    return PageLayout(page_number=page_number, width=width, height=height, elements=tuple(elements))


def stacked_column(gaps: Sequence[float], x: float = 0.0, y: float = 100.0, height: float = 12.0, page: int = 1) -> List[TextElement]:
    """Elements in one column separated by the given vertical gaps."""
    elements = [make_element(text="Line 0", x=x, y=y, height=height, page=page)]
    for index, gap in enumerate(gaps, start=1):
        previous = elements[-1]
        elements.append(make_element(
            text=f"Line {index}",
            x=x,
            y=previous.y + previous.height + gap,
            height=height,
            page=page,
        ))
    return elements


def create_text_pdf(path: Path, pages: Sequence[Sequence[str]]) -> Path:
    """Write a PDF with one text line per entry, 20pt apart, starting 72pt from the top."""
    pdf = canvas.Canvas(str(path), pagesize=letter)
    _, page_height = letter
    for lines in pages:
        pdf.setFont("Helvetica", 12)
        for index, line in enumerate(lines):
            pdf.drawString(72, page_height - 72 - index * 20, line)
        pdf.showPage()
    pdf.save()
    return path


def create_blank_pdf(path: Path, page_count: int = 1) -> Path:
    """PDF whose pages carry no text layer."""
    pdf = canvas.Canvas(str(path), pagesize=letter)
    for _ in range(page_count):
        pdf.rect(100, 100, 200, 200, fill=1)
        pdf.showPage()
    pdf.save()
    return path
