"""
Configuration module
====================

Loads application settings from environment variables and the ``.env`` file:
log level, store location, and overrides for the header-detection tunables.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """
    Application settings, populated automatically from the environment.

    Attributes:
        LOG_LEVEL: level name for the ``escopo`` root logger
        STORE_PATH: JSON file backing the scope-sequence store
        HEADER_VOCABULARY_PATH: optional YAML replacing the bundled header vocabulary
        HEADER_SEARCH_ROWS: how many leading rows are scanned for a header row
        MIN_MANDATORY_FOUND: mandatory columns a row must name to count as the header
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    LOG_LEVEL: str = "INFO"
    STORE_PATH: str = "data/escopo_sequencia.json"
    HEADER_VOCABULARY_PATH: Optional[str] = None
    HEADER_SEARCH_ROWS: int = 10
    MIN_MANDATORY_FOUND: int = 3

    @field_validator("HEADER_SEARCH_ROWS", "MIN_MANDATORY_FOUND")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        value = (v or "").strip().upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v!r}")
        return value


_settings_instance = None


def get_settings() -> Settings:
    """
    Return the settings singleton, creating it on first use.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
