"""
Error handling utilities for PDF quality-control operations.

This module provides custom exceptions, the request-id context variable, a
decorator for consistent error handling in route handlers, and the FastAPI
exception handlers that render errors as JSON.
"""
import asyncio
import logging
import time
import uuid
from typing import Callable, TypeVar, ParamSpec
from functools import wraps
from contextvars import ContextVar

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Context variable for request ID tracking across async contexts
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

# Type variables for generic function signatures
P = ParamSpec('P')
T = TypeVar('T')


# ============================================================================
# Custom Exceptions
# ============================================================================

class QCServiceError(Exception):
    """Base exception for PDF quality-control errors."""
    pass


class PDFValidationError(QCServiceError):
    """Uploaded PDF failed validation."""
    pass


class FileEncodingError(QCServiceError):
    """File could not be read, decoded, or saved."""
    pass


class ExtractionUnavailableError(QCServiceError):
    """No layout data could be obtained for any page of the document."""
    pass


class InvalidInputError(QCServiceError):
    """A text element is malformed (negative size, non-positive font size, ...)."""
    pass


class TextAnalysisError(QCServiceError):
    """A text QC provider failed to produce issues."""
    pass


class OCRError(QCServiceError):
    """OCR collaborator failed."""
    pass


class ClientConfigurationError(QCServiceError):
    """Client not properly configured."""
    pass


class AnalysisFailedError(QCServiceError):
    """Every requested analysis pipeline failed."""
    pass


def _to_http_exception(
    exc: Exception,
    error_message: str,
    func_name: str,
    request_id: str,
    elapsed: float
) -> HTTPException:
    """Translate an exception raised by a handler into an HTTPException."""
    headers = {"X-Request-ID": request_id}

    if isinstance(exc, PDFValidationError):
        logger.error(f"[{request_id}] {error_message} - Validation error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"PDF validation failed: {exc}", headers=headers)
    if isinstance(exc, ExtractionUnavailableError):
        logger.error(f"[{request_id}] {error_message} - No layout data after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=422, detail=str(exc), headers=headers)
    if isinstance(exc, ClientConfigurationError):
        logger.error(f"[{request_id}] {error_message} - Configuration error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=500, detail=f"Service configuration error: {exc}", headers=headers)
    if isinstance(exc, AnalysisFailedError):
        logger.error(f"[{request_id}] {error_message} - All analyses failed after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=500, detail=f"{error_message}: {exc}", headers=headers)
    if isinstance(exc, (TextAnalysisError, OCRError)):
        logger.error(f"[{request_id}] {error_message} - Upstream error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=502, detail=str(exc), headers=headers)
    if isinstance(exc, QCServiceError):
        logger.error(f"[{request_id}] {error_message} - QC error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=str(exc), headers=headers)
    if isinstance(exc, FileNotFoundError):
        logger.error(f"[{request_id}] {error_message} - File not found after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=404, detail=f"File not found: {exc}", headers=headers)
    if isinstance(exc, ValueError):
        logger.error(f"[{request_id}] {error_message} - Invalid value after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"Invalid input: {exc}", headers=headers)

    logger.exception(f"[{request_id}] {error_message} - Unexpected error in {func_name} after {elapsed:.2f}s: {exc}")
    return HTTPException(status_code=500, detail=f"{error_message}: {exc}", headers=headers)


def _log_completion(func_name: str, request_id: str, elapsed: float) -> None:
    """Log handler completion, warning when the response was slow."""
    from pdfqc.core.config import settings
    threshold_ms = settings.RESPONSE_TIME_WARNING_THRESHOLD_MS
    elapsed_ms = elapsed * 1000
    if elapsed_ms > threshold_ms:
        logger.warning(
            f"[{request_id}] SLOW RESPONSE: {func_name} took {elapsed:.2f}s "
            f"({elapsed_ms:.0f}ms > {threshold_ms}ms threshold)"
        )
    else:
        logger.info(f"[{request_id}] Completed {func_name} in {elapsed:.2f}s")


# ============================================================================
# Error Handler Decorator
# ============================================================================

def handle_qc_errors(
    error_message: str = "Operation failed"
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to handle errors in QC route handlers.

    Converts domain errors to appropriate HTTP exceptions and logs them with
    the request id and elapsed time. Works with both sync and async functions.

    Args:
        error_message: Custom error message prefix

    Returns:
        Decorated function with error handling

    Example:
        @handle_qc_errors("Failed to run visual QC")
        async def visual_qc(file: UploadFile) -> dict:
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = await func(*args, **kwargs)
                _log_completion(func.__name__, request_id, time.time() - start_time)
                return result
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                ) from e

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = func(*args, **kwargs)
                _log_completion(func.__name__, request_id, time.time() - start_time)
                return result
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                ) from e

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as a uniform JSON body."""
    headers = dict(exc.headers or {})
    request_id = request_id_var.get()
    if request_id:
        headers.setdefault("X-Request-ID", request_id)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail, "request_id": request_id or None},
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors as a uniform JSON body."""
    request_id = request_id_var.get()
    logger.warning(f"[{request_id}] Request validation failed: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "Request validation failed",
            "details": jsonable_errors(exc),
            "request_id": request_id or None,
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serializable context from pydantic validation errors."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
