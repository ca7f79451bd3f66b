"""
Tolerances used by the visual analyzers.
"""
from dataclasses import dataclass, replace, asdict
from typing import Optional

from pdfqc.core.config import Settings, settings as default_settings


@dataclass(frozen=True)
class QCThresholds:
    """Tolerance set for one analysis run.

    The first four fields are the user-adjustable tolerances; the rest are
    fixed heuristics that rarely need changing.
    """

    alignment: float = 3.0
    spacing: float = 5.0
    margin: float = 20.0
    font_size: float = 2.0

    alignment_band: float = 5.0
    spacing_column_tolerance: float = 100.0
    spacing_max_gap: float = 50.0
    spacing_min_samples: int = 4
    short_text_max: int = 10
    long_text_min: int = 50
    font_size_relative: float = 0.1
    default_page_width: float = 612.0

    def __post_init__(self):
        for name in ("alignment", "spacing", "margin", "font_size", "alignment_band"):
            if getattr(self, name) <= 0:
                raise ValueError(f"Threshold '{name}' must be positive")
        if self.short_text_max > self.long_text_min:
            raise ValueError("short_text_max must not exceed long_text_min")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "QCThresholds":
        config = config or default_settings
        return cls(
            alignment=config.ALIGNMENT_THRESHOLD,
            spacing=config.SPACING_THRESHOLD,
            margin=config.MARGIN_THRESHOLD,
            font_size=config.FONT_SIZE_THRESHOLD,
            alignment_band=config.ALIGNMENT_BAND_SIZE,
            spacing_column_tolerance=config.SPACING_COLUMN_TOLERANCE,
            spacing_max_gap=config.SPACING_MAX_GAP,
            spacing_min_samples=config.SPACING_MIN_SAMPLES,
            short_text_max=config.TYPOGRAPHY_SHORT_TEXT_MAX,
            long_text_min=config.TYPOGRAPHY_LONG_TEXT_MIN,
            font_size_relative=config.TYPOGRAPHY_RELATIVE_DEVIATION,
            default_page_width=config.DEFAULT_PAGE_WIDTH,
        )

    def with_overrides(
        self,
        alignment: Optional[float] = None,
        spacing: Optional[float] = None,
        margin: Optional[float] = None,
        font_size: Optional[float] = None,
    ) -> "QCThresholds":
        """Copy with the user-adjustable tolerances replaced where given."""
        overrides = {
            key: value
            for key, value in (
                ("alignment", alignment),
                ("spacing", spacing),
                ("margin", margin),
                ("font_size", font_size),
            )
            if value is not None
        }
        return replace(self, **overrides) if overrides else self

    def fingerprint(self) -> str:
        """Stable string identifying this tolerance set (used in cache keys)."""
        return ",".join(f"{k}={v}" for k, v in sorted(asdict(self).items()))
