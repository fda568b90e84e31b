"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Variables use the ``MENOWELL_`` prefix, e.g. ``MENOWELL_LOG_LEVEL=DEBUG``.
    """

    # --- App ---
    app_name: str = "MenoWell"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:5173"]

    # --- Analytics ---
    content_library_path: str | None = None  # defaults to the bundled YAML
    include_contextual_recommendations: bool = False

    model_config = SettingsConfigDict(
        env_prefix="MENOWELL_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
