"""
Mistral OCR client used when a document has no text layer.
"""
import base64
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from pdfqc.core.config import settings
from pdfqc.core.error_handling import ClientConfigurationError, OCRError
from pdfqc.core.http_client import get_async_client, request_with_retry
from pdfqc.models.mistral_models import (
    DocumentInput,
    MistralErrorResponse,
    MistralOCRRequest,
    MistralOCRResponse,
)
from pdfqc.models.text_issues import OCRResult

logger = logging.getLogger(__name__)


class MistralOCRClient:
    """Client for the Mistral OCR endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the OCR client.

        Args:
            api_key: Mistral API key (defaults to MISTRAL_API_KEY)
            api_url: Optional custom API URL
            model: Optional custom model name
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.api_key = api_key or settings.MISTRAL_API_KEY
        if not self.api_key:
            raise ClientConfigurationError("MISTRAL_API_KEY is not configured")

        self.api_url = api_url or settings.MISTRAL_API_URL
        self.model = model or settings.MISTRAL_MODEL
        self.timeout = timeout
        self._transport = transport

        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }

    async def recognize(self, pdf_bytes: bytes) -> OCRResult:
        """Run OCR over a whole PDF.

        Args:
            pdf_bytes: PDF content

        Returns:
            OCRResult with the page texts joined by blank lines. Mistral does
            not report a confidence score, so ``confidence`` is None.

        Raises:
            OCRError: If the request fails or the response cannot be parsed
        """
        request = MistralOCRRequest(
            model=self.model,
            document=DocumentInput(
                document_url=f"data:application/pdf;base64,{base64.b64encode(pdf_bytes).decode('ascii')}"
            ),
        )

        logger.info(f"Sending OCR request to Mistral API: {self.api_url}")
        async with get_async_client(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await request_with_retry(
                    client,
                    "POST",
                    self.api_url,
                    headers=self.headers,
                    json=request.model_dump(),
                    max_attempts=settings.MISTRAL_RETRY_ATTEMPTS,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                raise OCRError(f"Mistral OCR request failed: {e}") from e

        if response.status_code != 200:
            raise OCRError(self._error_message(response))

        try:
            ocr_response = MistralOCRResponse.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            logger.error(f"Failed to parse OCR response: {e}")
            raise OCRError(f"Invalid OCR response format: {e}") from e

        page_texts = [text.strip() for text in ocr_response.page_texts]
        logger.info(f"OCR recognized {len(page_texts)} pages with model {ocr_response.model}")
        return OCRResult(
            text="\n\n".join(page_texts),
            confidence=None,
            page_texts=page_texts,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            detail = MistralErrorResponse.model_validate(response.json()).message
        except (ValidationError, ValueError):
            detail = response.text
        message = f"Mistral API error ({response.status_code}): {detail}"
        logger.error(message)
        return message
