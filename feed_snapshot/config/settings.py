"""Application settings with environment variable support."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings that are not part of the workflow inputs."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FEED_SNAPSHOT_",  # FEED_SNAPSHOT_LOG_LEVEL, etc.
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Fetching
    user_agent: str = "feed-snapshot/1.0"
    fetch_timeout_seconds: Optional[float] = None  # transport default
    fetch_max_retries: int = 0

    # Output
    output_name: str = "feed"


class ActionInputs(BaseSettings):
    """Raw workflow inputs, read as GitHub Actions exposes them (INPUT_*)."""

    model_config = SettingsConfigDict(
        env_prefix="INPUT_",
        extra="ignore",
    )

    feed_url: Optional[str] = None
    file_path: Optional[str] = None
    parser_options: Optional[str] = None
    fetch_options: Optional[str] = None
    remove_published: Optional[str] = None
    remove_last_build_date: Optional[str] = None
    mode: Optional[str] = None


settings = Settings()
