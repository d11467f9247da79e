"""
Library Catalog — Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from environment variables (or a .env file), are validated
       on import, and are exposed through the `settings` singleton.
Who:   Imported by main.py (app factory, logging) and the routes (via app.state).
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Attributes are grouped by concern.
    """

    # ── Application ───────────────────────────────────────────────────────
    app_name: str = Field(default="Library Catalog API")

    # ── Catalog ───────────────────────────────────────────────────────────
    # What: Load the three sample books (ids 1..3) when a store is created.
    # Off: the store starts empty and the first generated id is 1.
    seed_catalog: bool = Field(default=True)

    # What: Map validation failures on PUT /api/books/{id} to 404 instead of 400.
    # Older clients expect 404 for both cases; enable for wire compatibility.
    legacy_update_error_mapping: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (see cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

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

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported by main.py
settings = Settings()
