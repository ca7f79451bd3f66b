"""
FastAPI application for PDF quality control.
Reports text issues (spelling, grammar, style) and visual layout issues
(alignment, spacing, margins, typography) for uploaded PDFs.
"""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from pdfqc.api.routes import health, qc
from pdfqc.core.logging import setup_logging
from pdfqc.core.error_handling import http_exception_handler, validation_exception_handler
from pdfqc.core.middleware import RequestIDMiddleware

# Configure logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PDF QC Service",
    description="API for text and visual quality control of PDF documents",
    version="1.0.0"
)

# Middleware
app.add_middleware(RequestIDMiddleware)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Include routers
app.include_router(health.router)
app.include_router(qc.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, workers=1)
