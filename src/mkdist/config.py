"""Environment settings for mkdist.

Locates the external tools the loaders shell out to. Every setting can be
overridden with an ``MKDIST_``-prefixed environment variable or a ``.env``
file, e.g. ``MKDIST_TSC_COMMAND="npx tsc"``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MKDIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # External executables (a command line; the first word is looked up on PATH)
    esbuild_command: str = "esbuild"
    tsc_command: str = "tsc"
    sass_command: str = "sass"

    # Seconds before an external tool call is abandoned
    tool_timeout: float = Field(default=60.0, gt=0)

    # Default worker count for the run driver
    concurrency: int = Field(default=4, ge=1)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings cache (useful for testing)."""
    global _settings
    _settings = None
