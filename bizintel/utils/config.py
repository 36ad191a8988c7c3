"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Companies House (Optional - registry confirmation is skipped without it)
    COMPANIES_HOUSE_API_KEY: Optional[str] = None
    COMPANIES_HOUSE_BASE_URL: str = "https://api.company-information.service.gov.uk"
    REGISTRY_ENABLED: bool = True
    REGISTRY_TIMEOUT: float = 5.0

    # Taxonomy
    TAXONOMY_DATA_PATH: Optional[str] = None  # Defaults to the bundled dataset
    DATABASE_URL: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ANALYSIS_VERSION: str = "2.0.0"

    # Resolution thresholds
    HIGH_CONFIDENCE_THRESHOLD: float = 0.7
    MEDIUM_CONFIDENCE_THRESHOLD: float = 0.4

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase

    @property
    def registry_configured(self) -> bool:
        return self.REGISTRY_ENABLED and bool(self.COMPANIES_HOUSE_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
