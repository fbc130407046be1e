"""Service configuration.

Only the HTTP service reads these settings; the engine takes everything it
needs as arguments.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from CONTEXT_OPTIMIZER_* variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="CONTEXT_OPTIMIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "development"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Comma-separated list of allowed origins
    cors_allowed_origins: str = "*"

    # Largest CLAUDE.md body accepted by the API, in bytes
    max_content_bytes: int = 1_000_000

    # Defaults for requests that omit them
    default_project_path: str = "."
    default_source_file: str = "CLAUDE.md"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


settings = Settings()
