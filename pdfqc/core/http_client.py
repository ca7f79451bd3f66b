"""
Shared HTTP client utilities: configured AsyncClient and retry helper.
"""
from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Dict, Iterable, Optional

import httpx

from pdfqc.core.config import settings
from pdfqc.core.error_handling import request_id_var

logger = logging.getLogger(__name__)


def get_async_client(
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create a configured AsyncClient with shared limits/timeouts."""
    return httpx.AsyncClient(
        timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
        limits=httpx.Limits(
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
            max_connections=settings.HTTP_MAX_CONNECTIONS,
        ),
        transport=transport,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    json: Any = None,
    timeout: Optional[float] = None,
    retry_statuses: Iterable[int] | None = None,
    max_attempts: Optional[int] = None,
    backoff_base: Optional[float] = None,
) -> httpx.Response:
    """
    Perform an HTTP request with bounded retries and exponential backoff.

    - Honors Retry-After headers for 429/503 when present.
    - Retries connection errors and configured status codes.
    - Returns the last response when every attempt hit a retryable status.
    """
    attempts = max_attempts or settings.HTTP_RETRY_ATTEMPTS
    statuses = tuple(retry_statuses or settings.HTTP_RETRY_STATUSES)
    backoff = settings.HTTP_RETRY_BACKOFF_SECONDS if backoff_base is None else backoff_base
    req_id = request_id_var.get()

    for attempt in range(1, attempts + 1):
        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                json=json,
                timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
            )

            if response.status_code not in statuses or attempt == attempts:
                return response

            delay = _get_retry_after_seconds(response) or backoff * math.pow(2, attempt - 1)
            logger.warning(
                f"[{req_id}] Retryable status {response.status_code} on {method} {url} "
                f"attempt {attempt}/{attempts}, sleeping {delay:.2f}s"
            )
            await asyncio.sleep(delay)

        except httpx.HTTPError as exc:
            if attempt == attempts:
                logger.error(f"[{req_id}] HTTP error after {attempts} attempts: {exc}")
                raise
            delay = backoff * math.pow(2, attempt - 1)
            logger.warning(
                f"[{req_id}] HTTP error on attempt {attempt}/{attempts}: {exc}; sleeping {delay:.2f}s"
            )
            await asyncio.sleep(delay)

    raise RuntimeError("request_with_retry exhausted attempts")


def _get_retry_after_seconds(response: httpx.Response) -> Optional[float]:
    retry_after = response.headers.get("Retry-After")
    if not retry_after:
        return None
    try:
        return float(retry_after)
    except ValueError:
        return None
