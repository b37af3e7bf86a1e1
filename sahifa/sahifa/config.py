"""
Configuration management for Sahifa library.

Uses Pydantic Settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables with the SAHIFA_ prefix.
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SahifaSettings(BaseSettings):
    """
    Configuration settings for Sahifa library.

    All settings can be overridden via environment variables with SAHIFA_ prefix.

    Example:
        export SAHIFA_PAGE_CAPACITY="1200"
        export SAHIFA_WEIGHT_METRIC="letters"
        export SAHIFA_MAX_FONT_SCALE="1.4"
    """

    model_config = SettingsConfigDict(
        env_prefix="SAHIFA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ============ Page Layout ============

    page_capacity: int = Field(
        default=1300,
        description="Maximum page weight at font scale 1.0 on regular screens",
        ge=1,
    )

    compact_page_capacity: int = Field(
        default=950,
        description="Maximum page weight at font scale 1.0 on compact (mobile) screens",
        ge=1,
    )

    weight_metric: Literal["characters", "letters", "words"] = Field(
        default="characters",
        description="How a verse's page weight is measured",
    )

    # ============ Display ============

    default_font_scale: float = Field(
        default=1.0,
        description="Font scale a new session starts with",
        gt=0.0,
    )

    min_font_scale: float = Field(
        default=0.8,
        description="Smallest allowed font scale",
        gt=0.0,
    )

    max_font_scale: float = Field(
        default=1.5,
        description="Largest allowed font scale",
        gt=0.0,
    )

    scale_sensitivity: float = Field(
        default=0.6,
        description="Fraction of capacity lost per unit of font scale above 1.0",
        ge=0.0,
        le=1.0,
    )

    default_theme: Literal["light", "dark"] = Field(
        default="light",
        description="Theme a new session starts with",
    )

    # ============ Persistence ============

    position_key: str = Field(
        default="quran-current-page",
        description="Position store key holding the last page number",
    )

    chapter_key: str = Field(
        default="quran-current-chapter",
        description="Position store key holding the last chapter id",
    )

    # ============ Navigation ============

    prefetch_neighbours: bool = Field(
        default=True,
        description="Prefetch the previous and next chapter after each settle",
    )

    mushaf_page_count: int = Field(
        default=604,
        description="Number of fixed-range pages in the flat mushaf numbering",
        ge=1,
    )

    match_threshold: float = Field(
        default=0.7,
        description="Minimum similarity for resolving a chapter by name",
        ge=0.0,
        le=1.0,
    )

    # ============ Validators ============

    @model_validator(mode="after")
    def check_scale_bounds(self) -> "SahifaSettings":
        """Ensure min <= default <= max font scale."""
        if self.min_font_scale > self.max_font_scale:
            raise ValueError("min_font_scale must be <= max_font_scale")
        if not self.min_font_scale <= self.default_font_scale <= self.max_font_scale:
            raise ValueError("default_font_scale must lie within the font scale bounds")
        return self


# Default settings instance
_default_settings: SahifaSettings | None = None


def get_settings() -> SahifaSettings:
    """
    Get the default settings instance (lazily created).

    Returns:
        SahifaSettings: The default settings
    """
    global _default_settings
    if _default_settings is None:
        _default_settings = SahifaSettings()
    return _default_settings


def configure(**kwargs) -> SahifaSettings:
    """
    Create and set new default settings.

    Args:
        **kwargs: Settings to override

    Returns:
        SahifaSettings: The new settings instance
    """
    global _default_settings
    _default_settings = SahifaSettings(**kwargs)
    return _default_settings
