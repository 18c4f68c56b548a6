"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "QuoteWatch"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Alpha Vantage
    alphavantage_api_key: Optional[str] = None
    alphavantage_base_url: str = "https://www.alphavantage.co/query"
    intraday_interval: str = "1min"
    output_size: str = "compact"  # compact = latest 100 points
    request_timeout_seconds: float = 10.0
    provider_timezone: str = "US/Eastern"  # Used when the payload omits it

    # Polling defaults (CLI flags and prompts take precedence)
    default_symbol: Optional[str] = None
    default_update_interval: Optional[int] = None
    retry_initial_delay: float = 5.0

    # Feature Flags
    use_mock_data: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class AnalyzerConfig(BaseModel):
    """
    Immutable per-run configuration handed to the polling loop.

    Built once at startup from CLI input and Settings.
    """

    symbol: str = Field(..., min_length=1, description="Ticker to poll, e.g. IBM")
    update_interval: int = Field(..., gt=0, description="Seconds between cycles")
    api_key: Optional[str] = Field(default=None, repr=False)

    class Config:
        frozen = True

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("symbol must not be blank")
        return value
