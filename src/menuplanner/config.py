"""Engine configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MENUPLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Menu generation
    menu_top_k: int = Field(default=8, ge=1)  # candidates sampled per day
    swap_top_k: int = Field(default=10, ge=1)  # wider pool when regenerating a single day
    swap_candidate_limit: int = Field(default=5, ge=1)

    # Ingredient matching
    fuzzy_accept_threshold: float = Field(default=0.74, ge=0.0, le=1.0)
    review_threshold: float = Field(default=0.78, ge=0.0, le=1.0)
    fallback_confidence: float = Field(default=0.45, ge=0.0, le=1.0)

    # Scoring
    child_weight_boost: float = Field(default=1.2, gt=0.0)

    # Shopping list
    keep_placeholder_counts: bool = False

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
