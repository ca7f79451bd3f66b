"""
Azure OpenAI text QC provider.
"""
import asyncio
import json
import logging
import re
from typing import Any, List, Optional

from openai import AzureOpenAI, OpenAIError

from pdfqc.core.config import settings
from pdfqc.core.error_handling import ClientConfigurationError, TextAnalysisError
from pdfqc.models.text_issues import RawTextIssue, TextIssueType
from pdfqc.services.text_qc.base_provider import TextIssueProvider

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*\n(.*?)```", re.DOTALL)

# Types the model sometimes uses for grammar problems
_TYPE_ALIASES = {"punctuation": TextIssueType.GRAMMAR}


def parse_llm_issues(content: str, text_length: int) -> List[RawTextIssue]:
    """Parse the model's JSON array of issues.

    Code fences around the array are removed. Items with an unknown type or
    without a usable position are dropped rather than failing the whole reply.

    Raises:
        TextAnalysisError: If the reply is not a JSON array
    """
    match = _FENCED_JSON.search(content)
    payload = match.group(1) if match else content

    try:
        items = json.loads(payload.strip())
    except json.JSONDecodeError as e:
        raise TextAnalysisError(f"LLM response is not valid JSON: {e}") from e
    if not isinstance(items, list):
        raise TextAnalysisError("LLM response is not a JSON array")

    issues = []
    for item in items:
        issue = _to_raw_issue(item, text_length)
        if issue is None:
            logger.debug(f"Dropping malformed LLM issue: {item!r}")
            continue
        issues.append(issue)

    dropped = len(items) - len(issues)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed issues from LLM response")
    return issues


def _to_raw_issue(item: Any, text_length: int) -> Optional[RawTextIssue]:
    if not isinstance(item, dict):
        return None

    raw_type = str(item.get("type", "")).lower()
    try:
        issue_type = _TYPE_ALIASES.get(raw_type) or TextIssueType(raw_type)
    except ValueError:
        return None

    position = item.get("position")
    length = item.get("length") or 1
    if not isinstance(position, int) or not isinstance(length, int):
        return None
    if position < 0 or position >= text_length:
        return None

    suggestion = item.get("suggestion")
    return RawTextIssue(
        type=issue_type,
        description=str(item.get("description") or f"{issue_type.value.capitalize()} issue"),
        start=position,
        end=min(position + max(length, 1), text_length),
        suggestion=str(suggestion) if suggestion is not None else None,
    )


class LLMTextIssueProvider(TextIssueProvider):
    """Asks an Azure OpenAI chat deployment for spelling, grammar and style issues."""

    name = "azure-openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        deployment: Optional[str] = None,
        api_version: Optional[str] = None,
        client: Optional[AzureOpenAI] = None
    ):
        """
        Initialize Azure OpenAI provider.

        Args:
            api_key: Azure OpenAI API key (uses settings if not provided)
            endpoint: Azure OpenAI endpoint URL (uses settings if not provided)
            deployment: Deployment name (uses settings if not provided)
            api_version: API version (uses settings if not provided)
            client: Pre-built client (tests pass a mock)
        """
        self.deployment = settings.AZURE_OPENAI_DEPLOYMENT if deployment is None else deployment

        if client is not None:
            self.client = client
            return

        api_key = settings.AZURE_OPENAI_API_KEY if api_key is None else api_key
        endpoint = settings.AZURE_OPENAI_ENDPOINT if endpoint is None else endpoint
        api_version = settings.AZURE_OPENAI_API_VERSION if api_version is None else api_version
        if not api_key or not endpoint:
            raise ClientConfigurationError(
                "Azure OpenAI API key and endpoint must be provided either "
                "via parameters or environment variables (AZURE_OPENAI_API_KEY, AZURE_OPENAI_ENDPOINT)"
            )

        self.client = AzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=api_version
        )
        logger.info(f"Initialized text QC provider with deployment: {self.deployment}")

    async def provide_text_issues(self, text: str) -> List[RawTextIssue]:
        analyzed = text[:settings.TEXT_QC_MAX_CHARS]
        if len(analyzed) < len(text):
            logger.warning(
                f"Text truncated from {len(text)} to {len(analyzed)} characters for LLM analysis"
            )

        logger.info(f"Analyzing text with Azure OpenAI (length: {len(analyzed)} chars)")
        content = await asyncio.to_thread(self._complete, analyzed)
        issues = parse_llm_issues(content, len(analyzed))
        logger.info(f"LLM found {len(issues)} issues in the text")
        return issues

    def _complete(self, text: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.deployment,
                messages=[
                    {
                        "role": "system",
                        "content": settings.TEXT_QC_SYSTEM_PROMPT
                    },
                    {
                        "role": "user",
                        "content": settings.TEXT_QC_USER_PROMPT_TEMPLATE.format(text=text)
                    }
                ],
                temperature=0.0,
                max_tokens=settings.TEXT_QC_MAX_TOKENS
            )
        except OpenAIError as e:
            raise TextAnalysisError(f"Azure OpenAI request failed: {e}") from e

        content = response.choices[0].message.content
        if not content:
            raise TextAnalysisError("Azure OpenAI returned an empty response")
        return content.strip()
