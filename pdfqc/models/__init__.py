"""Domain dataclasses and Pydantic models for API validation."""

from .layout import BoundingBox, PageLayout, TextElement
from .issues import (
    AnalysisSummary,
    AnalyzerFailure,
    FileType,
    IssueType,
    QCIssue,
    Severity,
    VisualQCReport,
)
from .text_issues import (
    OCRResult,
    RawTextIssue,
    TextAnalysisResult,
    TextIssue,
    TextIssueLocation,
    TextIssueType,
)
from .api_models import (
    ElementsRequest,
    QCReportResponse,
    TextAnalysisRequest,
    TextAnalysisResponse,
    ThresholdOverrides,
    VisualQCResponse,
)

__all__ = [
    'BoundingBox',
    'PageLayout',
    'TextElement',
    'AnalysisSummary',
    'AnalyzerFailure',
    'FileType',
    'IssueType',
    'QCIssue',
    'Severity',
    'VisualQCReport',
    'OCRResult',
    'RawTextIssue',
    'TextAnalysisResult',
    'TextIssue',
    'TextIssueLocation',
    'TextIssueType',
    'ElementsRequest',
    'QCReportResponse',
    'TextAnalysisRequest',
    'TextAnalysisResponse',
    'ThresholdOverrides',
    'VisualQCResponse',
]
