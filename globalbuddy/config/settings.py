"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Result caps for the three ranking consumers
SEARCH_RESULT_LIMIT = 10
QA_RESULT_LIMIT = 3
QA_WINDOW_SIZE = 50
QA_SNIPPET_LENGTH = 120
NO_ANSWER_TEXT = "暂无可用答案。"


class Settings(BaseSettings):
    """Application settings."""

    # Paths
    db_path: Path = Path("data/globalbuddy.db")
    # JSON object of class name -> terms; replaces the built-in synonym table
    synonyms_path: Path | None = None

    # Matching
    search_result_limit: int = SEARCH_RESULT_LIMIT
    qa_result_limit: int = QA_RESULT_LIMIT
    qa_window_size: int = QA_WINDOW_SIZE
    qa_snippet_length: int = QA_SNIPPET_LENGTH
    qa_empty_answer: str = NO_ANSWER_TEXT

    # Boundary
    request_timeout_seconds: float = 10.0
    rate_limit_rpm: int = 60

    # Logging
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
