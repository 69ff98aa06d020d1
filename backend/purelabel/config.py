"""
PureLabel AI - Configuration Management

Loads and validates environment variables for API keys, engine selection
and OCR settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    google_api_key: str = Field(
        default="",
        alias="GOOGLE_GENERATIVE_AI_API_KEY",
        description="Google Gemini API key (cloud engine and co-pilot)"
    )
    opik_api_key: str = Field(
        default="",
        alias="OPIK_API_KEY",
        description="Comet Opik API key for observability"
    )

    # Application Settings
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT"
    )
    debug: bool = Field(
        default=True,
        alias="DEBUG"
    )
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL"
    )

    # Opik Settings
    opik_project_name: str = Field(
        default="purelabel",
        alias="OPIK_PROJECT_NAME"
    )

    # Engine Settings
    default_engine: str = Field(
        default="cloud",
        alias="DEFAULT_ENGINE",
        description="Engine used when a request does not name one (local | cloud)"
    )
    gemini_model: str = Field(
        default="gemini-2.0-flash",
        alias="GEMINI_MODEL"
    )
    remote_timeout_seconds: int = Field(
        default=30,
        alias="REMOTE_TIMEOUT_SECONDS"
    )
    local_simulated_delay_ms: int = Field(
        default=800,
        ge=0,
        alias="LOCAL_SIMULATED_DELAY_MS",
        description="Pause applied to typed input on the local engine (0 disables)"
    )

    # OCR Settings
    tesseract_lang: str = Field(default="eng", alias="TESSERACT_LANG")
    tesseract_cmd: Optional[str] = Field(
        default=None,
        alias="TESSERACT_CMD",
        description="Path to the tesseract binary if it is not on PATH"
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    # CORS Settings (for frontend communication)
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "https://*.vercel.app"],
        alias="CORS_ORIGINS"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_required_keys(self) -> dict[str, bool]:
        """Check which API keys are configured."""
        return {
            "google_api_key": bool(self.google_api_key),
            "opik_api_key": bool(self.opik_api_key),
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
