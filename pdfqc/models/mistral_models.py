"""
Pydantic models for Mistral OCR API requests and responses.
"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator


class DocumentInput(BaseModel):
    """Document input for Mistral OCR API."""

    type: str = Field(default="document_url", description="Type of document input")
    document_url: str = Field(..., description="Base64 encoded document URL")

    @field_validator('document_url')
    @classmethod
    def validate_document_url(cls, v: str) -> str:
        """Validate document URL starts with correct prefix."""
        if not v.startswith("data:application/pdf;base64,"):
            raise ValueError("Document URL must start with 'data:application/pdf;base64,'")
        return v


class MistralOCRRequest(BaseModel):
    """Request model for Mistral OCR API."""

    model: str = Field(default="mistral-ocr-latest", description="Model identifier")
    document: DocumentInput = Field(..., description="Document to process")
    include_image_base64: bool = Field(
        default=False,
        description="Whether to include image base64 in response"
    )


class OCRPage(BaseModel):
    """Single page content from OCR."""

    index: int = Field(..., description="Page index (0-based)")
    markdown: str = Field(..., description="Markdown content of the page")


class MistralOCRResponse(BaseModel):
    """Response model from Mistral OCR API.

    Only the fields the text pipeline uses are modeled; the rest are ignored.
    """

    pages: List[OCRPage] = Field(..., description="List of processed pages")
    model: str = Field(..., description="Model used for processing")
    usage_info: Optional[Dict[str, Any]] = Field(None, description="Usage information")

    @property
    def page_texts(self) -> List[str]:
        """Page markdown in page order."""
        return [page.markdown for page in sorted(self.pages, key=lambda p: p.index)]


class MistralErrorResponse(BaseModel):
    """Error response from Mistral API."""

    error: Any = Field(..., description="Error details")

    @property
    def message(self) -> str:
        """Extract error message."""
        if isinstance(self.error, dict):
            return self.error.get('message', str(self.error))
        return str(self.error)
