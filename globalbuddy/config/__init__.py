"""
Configuration - Application settings, error taxonomy, and the synonym table.
"""

from .errors import (
    ConfigurationError,
    ErrorCode,
    GlobalBuddyError,
    NotFoundError,
    QAError,
    SearchError,
    StorageError,
)
from .log_setup import configure_logging
from .settings import (
    NO_ANSWER_TEXT,
    QA_RESULT_LIMIT,
    QA_SNIPPET_LENGTH,
    QA_WINDOW_SIZE,
    SEARCH_RESULT_LIMIT,
    Settings,
    get_settings,
)
from .synonyms import DEFAULT_SYNONYM_CLASSES

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "SEARCH_RESULT_LIMIT",
    "QA_RESULT_LIMIT",
    "QA_WINDOW_SIZE",
    "QA_SNIPPET_LENGTH",
    "NO_ANSWER_TEXT",
    # Errors
    "ErrorCode",
    "GlobalBuddyError",
    "SearchError",
    "QAError",
    "NotFoundError",
    "StorageError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    # Synonyms
    "DEFAULT_SYNONYM_CLASSES",
]
