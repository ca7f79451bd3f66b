"""
Text QC service.

Runs the configured provider over the document text, falls back to the rule
based provider when the primary one fails or finds nothing, and annotates every
issue with its page, paragraph, section and surrounding text.
"""
import logging
from typing import List, Optional, Sequence

from pdfqc.core.config import settings
from pdfqc.core.error_handling import InvalidInputError, QCServiceError
from pdfqc.models.text_issues import (
    RawTextIssue,
    TextAnalysisResult,
    TextIssue,
    TextIssueLocation,
)
from pdfqc.services.text_extractor import ExtractedText
from pdfqc.services.text_qc.base_provider import TextIssueProvider
from pdfqc.services.text_qc.context import (
    ParagraphIndex,
    context_after,
    context_before,
    section_at,
    sentence_at,
)
from pdfqc.services.text_qc.rule_provider import RuleBasedTextIssueProvider

logger = logging.getLogger(__name__)


class TextAnalysisService:
    """Spelling, grammar and style QC over extracted document text."""

    def __init__(
        self,
        provider: Optional[TextIssueProvider] = None,
        fallback: Optional[TextIssueProvider] = None
    ):
        self.fallback = fallback or RuleBasedTextIssueProvider()
        self.provider = provider or self.fallback

    async def analyze(
        self,
        document: ExtractedText,
        source: str = "text-layer"
    ) -> TextAnalysisResult:
        """Analyze document text.

        Args:
            document: Text with page offsets
            source: Where the text came from ("text-layer", "ocr", "request")

        Returns:
            TextAnalysisResult with issues sorted by start offset

        Raises:
            InvalidInputError: If the text is empty
        """
        text = document.text
        if not text.strip():
            raise InvalidInputError("No text to analyze")

        raw_issues, provider_name, error = await self._collect(text)
        paragraphs = ParagraphIndex(text)
        issues = sorted(
            (self._annotate(issue, text, document, paragraphs) for issue in self._clamp(raw_issues, len(text))),
            key=lambda issue: (issue.location.start, issue.location.end),
        )

        result = TextAnalysisResult(
            content=text,
            issues=issues,
            provider=provider_name,
            error=error,
            source=source,
        )
        logger.info(
            f"Text QC complete: provider={provider_name}, chars={len(text)}, "
            f"issues={len(issues)}, stats={result.issue_stats}"
        )
        return result

    async def analyze_text(self, text: str) -> TextAnalysisResult:
        """Analyze free text supplied directly by a caller (single page)."""
        return await self.analyze(ExtractedText.from_pages([text]), source="request")

    async def _collect(self, text: str):
        """Run the primary provider, falling back to rules; returns (issues, provider name, error)."""
        if self.provider is self.fallback:
            return await self.fallback.provide_text_issues(text), self.fallback.name, None

        error = None
        try:
            issues = await self.provider.provide_text_issues(text)
            if issues:
                return issues, self.provider.name, None
            logger.info(f"{self.provider.name} found no issues; running {self.fallback.name} checks")
        except QCServiceError as e:
            error = str(e)
            logger.warning(f"{self.provider.name} text analysis failed, using {self.fallback.name} checks: {e}")

        return await self.fallback.provide_text_issues(text), self.fallback.name, error

    @staticmethod
    def _clamp(issues: Sequence[RawTextIssue], text_length: int) -> List[RawTextIssue]:
        clamped = []
        for issue in issues:
            start = min(max(issue.start, 0), max(text_length - 1, 0))
            end = min(max(issue.end, start + 1), text_length)
            if (start, end) != (issue.start, issue.end):
                issue = RawTextIssue(issue.type, issue.description, start, end, issue.suggestion)
            clamped.append(issue)
        return clamped

    @staticmethod
    def _annotate(
        issue: RawTextIssue,
        text: str,
        document: ExtractedText,
        paragraphs: ParagraphIndex
    ) -> TextIssue:
        return TextIssue(
            type=issue.type,
            description=issue.description,
            suggestion=issue.suggestion,
            location=TextIssueLocation(
                start=issue.start,
                end=issue.end,
                page=document.page_at(issue.start),
                paragraph=paragraphs.paragraph_at(issue.start),
                section=section_at(text, issue.start),
                full_sentence=sentence_at(text, issue.start),
                error_word=text[issue.start:issue.end],
                context_before=context_before(text, issue.start),
                context_after=context_after(text, issue.end),
            ),
        )


def build_text_analysis_service() -> TextAnalysisService:
    """Service using Azure OpenAI when configured, rule-based checks otherwise."""
    if settings.llm_configured:
        from pdfqc.services.text_qc.llm_provider import LLMTextIssueProvider
        return TextAnalysisService(provider=LLMTextIssueProvider())
    logger.info("Azure OpenAI not configured; text QC uses rule-based checks only")
    return TextAnalysisService()
