"""
Pydantic models for API request and response structures.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional, Dict, Any

from pdfqc.models.layout import PageLayout, TextElement


class ThresholdOverrides(BaseModel):
    """User-adjustable visual QC tolerances; omitted values use the configured defaults."""

    alignment: Optional[float] = Field(None, gt=0, description="Max coordinate spread within an alignment band")
    spacing: Optional[float] = Field(None, gt=0, description="Max deviation from the dominant line gap")
    margin: Optional[float] = Field(None, gt=0, description="Edge distance below which margins are checked")
    font_size: Optional[float] = Field(None, gt=0, description="Max font size deviation in points")


class TextElementModel(BaseModel):
    """Positioned text run as supplied by an external layout extractor.

    Geometry is not range-checked here: malformed elements are skipped and
    counted during analysis instead of failing the whole request.
    """

    text: str
    x: float
    y: float
    width: float
    height: float
    font_size: float
    font_family: Optional[str] = None

    @field_validator('text')
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    def to_element(self, page: int) -> TextElement:
        return TextElement(
            text=self.text,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            font_size=self.font_size,
            page=page,
            font_family=self.font_family,
        )


class PageModel(BaseModel):
    """One page of text elements."""

    page_number: Optional[int] = Field(None, ge=1, description="1-based page number; defaults to list position")
    width: Optional[float] = Field(None, gt=0, description="Page width; defaults to DEFAULT_PAGE_WIDTH")
    height: float = Field(default=0.0, ge=0)
    elements: List[TextElementModel] = Field(default_factory=list)


class ElementsRequest(BaseModel):
    """Request model for visual QC over pre-extracted text elements."""

    pages: List[PageModel] = Field(..., min_length=1)
    thresholds: ThresholdOverrides = Field(default_factory=ThresholdOverrides)
    require_text_based: bool = Field(
        default=False,
        description="Fail with 422 instead of reporting an image-based document"
    )

    @model_validator(mode="after")
    def check_unique_pages(self) -> "ElementsRequest":
        numbers = [p.page_number or i for i, p in enumerate(self.pages, start=1)]
        if len(set(numbers)) != len(numbers):
            raise ValueError("Page numbers must be unique")
        return self

    def to_layouts(self, default_width: float) -> List[PageLayout]:
        layouts = []
        for index, page in enumerate(self.pages, start=1):
            number = page.page_number or index
            layouts.append(PageLayout(
                page_number=number,
                width=page.width or default_width,
                height=page.height,
                elements=tuple(el.to_element(number) for el in page.elements),
            ))
        return layouts

    model_config = {
        "json_schema_extra": {
            "example": {
                "pages": [
                    {
                        "page_number": 1,
                        "width": 612,
                        "height": 792,
                        "elements": [
                            {"text": "Introduction", "x": 72, "y": 72, "width": 120, "height": 18, "font_size": 18},
                            {"text": "Body text starts here.", "x": 72, "y": 100, "width": 300, "height": 12, "font_size": 12}
                        ]
                    }
                ],
                "thresholds": {"alignment": 3}
            }
        }
    }


class TextAnalysisRequest(BaseModel):
    """Request model for text-only QC."""

    text: str = Field(..., description="Text to check for spelling, grammar and style issues")

    @field_validator('text')
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text cannot be empty")
        return v


class SummaryModel(BaseModel):
    total_issues: int
    by_type: Dict[str, int]
    by_severity: Dict[str, int]
    by_page: Dict[int, int]


class VisualQCResponse(BaseModel):
    """Response model for visual layout QC."""

    success: bool = True
    filename: Optional[str] = None
    issues: List[Dict[str, Any]]
    summary: SummaryModel
    page_count: int
    file_type: str = Field(..., description="'text-based' or 'image-based'")
    text_element_count: int
    message: Optional[str] = None
    failures: List[Dict[str, Any]] = Field(default_factory=list)
    skipped_elements: int = 0
    cached: bool = False


class TextAnalysisResponse(BaseModel):
    """Response model for text QC."""

    success: bool = True
    content: str
    issues: List[Dict[str, Any]]
    issue_stats: Dict[str, int]
    provider: str
    source: str
    error: Optional[str] = None


class QCReportResponse(BaseModel):
    """Response model for the combined text and visual report."""

    success: bool = True
    filename: str
    content_hash: str
    page_count: int
    text_analysis: Optional[TextAnalysisResponse] = None
    visual_analysis: Optional[VisualQCResponse] = None
    errors: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-pipeline error messages when one of the pipelines failed"
    )
