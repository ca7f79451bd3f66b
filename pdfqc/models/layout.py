"""
Layout models for positioned text extracted from PDF pages.

Coordinates are page-viewport units with the origin at the top-left corner
and ``y`` growing downwards.
"""
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in page-viewport coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def union(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        """Smallest box enclosing every box in ``boxes``.

        Raises:
            ValueError: If ``boxes`` is empty
        """
        boxes = list(boxes)
        if not boxes:
            raise ValueError("Cannot compute the union of zero boxes")

        left = min(b.x for b in boxes)
        top = min(b.y for b in boxes)
        right = max(b.right for b in boxes)
        bottom = max(b.bottom for b in boxes)
        return cls(x=left, y=top, width=right - left, height=bottom - top)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class TextElement:
    """One positioned run of text on one page."""

    text: str
    """Rendered text, already trimmed."""

    x: float
    y: float
    width: float
    height: float

    font_size: float
    """Font size derived from the rendering transform."""

    page: int
    """1-based page number."""

    font_family: Optional[str] = None

    @property
    def bbox(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.width, self.height)

    def validation_error(self) -> Optional[str]:
        """Describe why this element is malformed, or None when it is usable."""
        if not isinstance(self.text, str) or not self.text.strip():
            return "empty text"
        coords = (self.x, self.y, self.width, self.height, self.font_size)
        if not all(isinstance(v, (int, float)) and math.isfinite(v) for v in coords):
            return "non-finite geometry"
        if self.width < 0 or self.height < 0:
            return f"negative size ({self.width}x{self.height})"
        if self.font_size <= 0:
            return f"non-positive font size ({self.font_size})"
        if self.page < 1:
            return f"invalid page number ({self.page})"
        return None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "font_size": self.font_size,
            "font_family": self.font_family,
            "page": self.page,
        }


@dataclass(frozen=True)
class PageLayout:
    """Text elements of a single page together with the page size."""

    page_number: int
    width: float
    height: float
    elements: Tuple[TextElement, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return len(self.elements) == 0
