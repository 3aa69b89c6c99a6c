"""
Gistbook Backend - Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Read by the app factory (`gistbook.main`) and the server entry point
       (`gistbook.server`). The RecordStore receives its URL explicitly and
       never imports this module.

The only behavior a deployment is expected to change is the listening port
(`PORT`, default 3000). The remaining settings exist for local development
and tests.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults; an empty environment starts a server
    on port 3000 backed by ./data/gistbook.db.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Database ──────────────────────────────────────────────────────────
    # Single-file SQLite database accessed through the aiosqlite driver.
    # The parent directory is created on startup if it does not exist.
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/gistbook.db",
        description="Async SQLAlchemy URL of the snippet/subject database",
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of origins allowed to call the API from a browser.
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
        "extra": "ignore",
    }


# Singleton instance, imported by the app factory and the server entry point
settings = Settings()
