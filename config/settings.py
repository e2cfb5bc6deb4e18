"""Application configuration using Pydantic Settings."""

import os
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# NOTE: logfire.configure() is not called here. Logfire is configured once at
# application startup (main.py via observability/logfire_config.py) or in the
# pytest hooks (conftest.py).


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a default so the service (and the test suite) can start
    without a .env file; model calls fail, and fall back, until
    GEMINI_API_KEY is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # CORS Settings
    allowed_origins: str = Field(
        default="http://localhost:3000, http://localhost:8080",
        description="Comma-separated list of allowed CORS origins"
    )

    # Language model
    gemini_api_key: str = Field(default="", description="Google Gemini API key")
    generation_model: str = Field(default="google-gla:gemini-2.0-flash", description="pydantic-ai model id")
    generation_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    generation_max_tokens: int = Field(default=1024, gt=0)
    generation_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout per model call")
    correction_pass_enabled: bool = Field(
        default=True,
        description="Send one correction prompt before repairing an invalid first pass"
    )
    desk_ask_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    desk_ask_max_tokens: int = Field(default=800, gt=0)

    # Rate limiting
    rate_limit_max_requests: int = Field(default=10, gt=0, description="Generation requests per window per client")
    resend_rate_limit_max_requests: int = Field(default=3, gt=0, description="Resend requests per window per client")
    rate_limit_window_seconds: int = Field(default=600, gt=0, description="Fixed window length in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Observability
    logfire_token: str = Field(default="", description="Logfire observability token")

    @field_validator("allowed_origins")
    @classmethod
    def parse_origins(cls, v: str) -> List[str]:
        """Parse comma-separated origins into a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"


# Create a singleton instance
settings = Settings()

# pydantic-ai's Gemini provider reads GEMINI_API_KEY from the environment.
if settings.gemini_api_key:
    os.environ.setdefault("GEMINI_API_KEY", settings.gemini_api_key)


def get_settings() -> "Settings":
    """Return the singleton settings instance."""
    return settings
