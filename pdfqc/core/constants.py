"""
Shared constants for PDF quality control.

This module consolidates constants used across the codebase to ensure
consistency and make it easier to modify common values.
"""

# Document classification
FILE_TYPE_TEXT_BASED = "text-based"
FILE_TYPE_IMAGE_BASED = "image-based"
IMAGE_BASED_MESSAGE = (
    "This appears to be an image-based PDF without extractable text elements. "
    "Consider using OCR for text extraction."
)

# Text extraction
PAGE_TEXT_SEPARATOR = "\n\n"

# Text issue context
CONTEXT_WINDOW_CHARS = 30
MIN_SENTENCE_CONTEXT_CHARS = 20
SECTION_LOOKBEHIND_CHARS = 500

# Cache key namespace
CACHE_KEY_PREFIX = "pdf"
