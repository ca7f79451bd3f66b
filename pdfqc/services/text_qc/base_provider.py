"""
Base text issue provider.

Providers find spelling, grammar and style problems in plain text and report
them as character ranges. Annotation with page, paragraph and sentence context
happens afterwards in ``TextAnalysisService``.
"""
from abc import ABC, abstractmethod
from typing import List

from pdfqc.models.text_issues import RawTextIssue


class TextIssueProvider(ABC):
    """Abstract base class for text QC providers."""

    name: str = "base"

    @abstractmethod
    async def provide_text_issues(self, text: str) -> List[RawTextIssue]:
        """Find issues in ``text``.

        Args:
            text: Full document text

        Returns:
            Issues with ``start``/``end`` offsets into ``text``, in any order

        Raises:
            TextAnalysisError: If the provider cannot analyze the text
        """
        pass
