"""
Text QC: spelling, grammar and style issue providers and the annotation service.
"""
from pdfqc.services.text_qc.base_provider import TextIssueProvider
from pdfqc.services.text_qc.rule_provider import RuleBasedTextIssueProvider
from pdfqc.services.text_qc.text_analysis import TextAnalysisService, build_text_analysis_service

__all__ = [
    "RuleBasedTextIssueProvider",
    "TextAnalysisService",
    "TextIssueProvider",
    "build_text_analysis_service",
]
