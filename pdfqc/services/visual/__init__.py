"""
Visual layout QC: page-scoped analyzers and the document aggregator.
"""
from pdfqc.services.visual.aggregator import ANALYZER_ORDER, analyze_document, analyze_page
from pdfqc.services.visual.alignment import AlignmentAnalyzer
from pdfqc.services.visual.base_analyzer import BaseAnalyzer
from pdfqc.services.visual.margin import MarginAnalyzer
from pdfqc.services.visual.spacing import SpacingAnalyzer
from pdfqc.services.visual.thresholds import QCThresholds
from pdfqc.services.visual.typography import TypographyAnalyzer

__all__ = [
    "ANALYZER_ORDER",
    "AlignmentAnalyzer",
    "BaseAnalyzer",
    "MarginAnalyzer",
    "QCThresholds",
    "SpacingAnalyzer",
    "TypographyAnalyzer",
    "analyze_document",
    "analyze_page",
]
