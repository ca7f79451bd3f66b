"""
Configuration settings for the application.
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Key Authentication
    API_KEY: Optional[str] = None  # Required for production - set in environment or .env file
    REQUIRE_API_KEY: bool = True  # Set to False to disable API key authentication (not recommended for production)

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # Options: "text", "json"
    LOG_INCLUDE_REQUEST_ID: bool = True  # Include X-Request-ID in logs

    # HTTP Client Configuration
    HTTP_CLIENT_TIMEOUT: float = 120.0  # Default timeout for HTTP clients (seconds)
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 10
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_RETRY_ATTEMPTS: int = 3  # Default retry attempts for transient errors
    HTTP_RETRY_BACKOFF_SECONDS: float = 2.0  # Base backoff for retries
    HTTP_RETRY_STATUSES: tuple[int, ...] = (429, 500, 502, 503, 504)

    # Performance Monitoring
    RESPONSE_TIME_WARNING_THRESHOLD_MS: int = 30000  # Warn if requests take longer than 30s (milliseconds)

    # Input Guardrails
    MAX_UPLOAD_MB: int = 10  # Max upload size for PDFs
    MAX_PDF_PAGES: int = 600  # Hard cap to avoid runaway processing

    # Feature toggles (mirror the QC settings panel)
    ENABLE_TEXT_QC: bool = True
    ENABLE_VISUAL_QC: bool = True

    # Visual QC tolerances (user-adjustable)
    ALIGNMENT_THRESHOLD: float = 3.0  # Units of spread before a band counts as misaligned
    SPACING_THRESHOLD: float = 5.0  # Units of deviation from the dominant line gap
    MARGIN_THRESHOLD: float = 20.0  # Units from the page edge that make an element a margin candidate
    FONT_SIZE_THRESHOLD: float = 2.0  # Points of deviation from the dominant font size

    # Visual QC heuristics (fixed, tuned against real documents)
    ALIGNMENT_BAND_SIZE: float = 5.0  # Quantization band for grouping coordinates
    SPACING_COLUMN_TOLERANCE: float = 100.0  # Max horizontal offset for two lines to share a column
    SPACING_MAX_GAP: float = 50.0  # Gaps at or above this belong to unrelated blocks
    SPACING_MIN_SAMPLES: int = 4  # Candidate gaps required before judging spacing
    TYPOGRAPHY_SHORT_TEXT_MAX: int = 10  # Texts shorter than this are "short"
    TYPOGRAPHY_LONG_TEXT_MIN: int = 50  # Texts at least this long are "long"
    TYPOGRAPHY_RELATIVE_DEVIATION: float = 0.1  # Minimum relative font size deviation
    DEFAULT_PAGE_WIDTH: float = 612.0  # US Letter width in points, used when a caller omits page size

    # Result cache
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 3600  # 1 hour
    CACHE_MAX_ENTRIES: int = 256

    # Mistral OCR (fallback for image-only documents)
    ENABLE_OCR_FALLBACK: bool = True
    MISTRAL_API_KEY: Optional[str] = None
    MISTRAL_API_URL: str = "https://api.mistral.ai/v1/ocr"
    MISTRAL_MODEL: str = "mistral-ocr-latest"
    MISTRAL_RETRY_ATTEMPTS: int = 3

    # Azure OpenAI (LLM-backed spelling/grammar/style review)
    AZURE_OPENAI_API_KEY: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT: str = "gpt-4o"
    AZURE_OPENAI_API_VERSION: str = "2024-02-15-preview"
    TEXT_QC_MAX_CHARS: int = 60000  # Longer texts are truncated before being sent to the LLM
    TEXT_QC_MAX_TOKENS: int = 4000

    TEXT_QC_SYSTEM_PROMPT: str = """You are a meticulous copy editor reviewing text extracted from a PDF document.
Report only genuine spelling, grammar, and style errors. Ignore proper nouns and technical terms.

Respond with ONLY a JSON array. Each element must have:
- "type": one of "spelling", "grammar", "style"
- "description": short explanation of the problem
- "position": 0-based character offset of the problem in the text
- "length": number of characters the problem spans
- "suggestion": the corrected text (optional)"""

    TEXT_QC_USER_PROMPT_TEMPLATE: str = """Analyze the following text for spelling, grammar, and style issues.

Text to analyze:
{text}"""

    @property
    def llm_configured(self) -> bool:
        """Whether Azure OpenAI credentials are present."""
        return bool(self.AZURE_OPENAI_API_KEY and self.AZURE_OPENAI_ENDPOINT)

    @property
    def ocr_configured(self) -> bool:
        """Whether the Mistral OCR fallback can be used."""
        return bool(self.ENABLE_OCR_FALLBACK and self.MISTRAL_API_KEY)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Allow extra fields in .env for backward compatibility


settings = Settings()
