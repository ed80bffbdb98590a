"""Application configuration using Pydantic Settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Workflow Canvas Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Workflow backend
    workflow_api_base_url: str = "https://rubik.valyx.com"
    workflow_api_key: str = ""
    workflow_api_timeout: float = 30.0
    default_workflow_id: str = "twflow_b210db0a85"

    # Execution document defaults
    default_timeout_minutes: float = 1.0

    # Load the bundled sample workflow when the backend is unreachable
    demo_fallback_enabled: bool = True

    def get_log_level(self) -> str:
        """Effective log level, forced to DEBUG in debug mode."""
        return "DEBUG" if self.debug else self.log_level.upper()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
