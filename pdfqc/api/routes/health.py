import os
import tempfile
from fastapi import APIRouter
from pdfqc.core.config import settings

router = APIRouter()

@router.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "PDF QC API", "status": "healthy"}

@router.get("/health")
async def health_check():
    """
    Comprehensive health check endpoint.

    Verifies:
    - Configuration for the optional collaborators (Azure OpenAI, Mistral OCR)
    - Enabled analyses and cache settings
    - File system write permissions
    """
    health_status = {
        "status": "healthy",
        "service": "PDF QC",
        "version": "1.0",
    }

    config_checks = {
        "text_qc_enabled": settings.ENABLE_TEXT_QC,
        "visual_qc_enabled": settings.ENABLE_VISUAL_QC,
        "llm_configured": settings.llm_configured,
        "text_provider": "azure-openai" if settings.llm_configured else "rules",
        "ocr_configured": settings.ocr_configured,
        "cache_enabled": settings.CACHE_ENABLED,
        "thresholds": {
            "alignment": settings.ALIGNMENT_THRESHOLD,
            "spacing": settings.SPACING_THRESHOLD,
            "margin": settings.MARGIN_THRESHOLD,
            "font_size": settings.FONT_SIZE_THRESHOLD,
        },
    }
    health_status.update(config_checks)

    # File system check
    try:
        temp_dir = tempfile.gettempdir()
        test_file = os.path.join(temp_dir, ".health_check_test")
        with open(test_file, 'w') as f:
            f.write("test")
        os.remove(test_file)
        health_status["filesystem_writable"] = True
        health_status["temp_directory"] = temp_dir
    except OSError as e:
        health_status["filesystem_writable"] = False
        health_status["filesystem_error"] = str(e)
        health_status["status"] = "degraded"

    if not (settings.ENABLE_TEXT_QC or settings.ENABLE_VISUAL_QC):
        health_status["status"] = "degraded"
        health_status["warning"] = "Both text QC and visual QC are disabled"

    return health_status
