"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the repository and the matching engine.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from globalbuddy.adapters.sqlite import SQLiteRepository
from globalbuddy.config import get_settings
from globalbuddy.domains.matching import Ranker, SynonymRegistry
from globalbuddy.domains.qa import AnswerComposer

logger = logging.getLogger(__name__)


@lru_cache
def get_sqlite_repository() -> SQLiteRepository:
    """Get SQLite repository singleton."""
    settings = get_settings()
    return SQLiteRepository(settings.db_path)


@lru_cache
def get_synonym_registry() -> SynonymRegistry:
    """Get the process-wide synonym registry."""
    return SynonymRegistry.from_settings(get_settings())


@lru_cache
def get_ranker() -> Ranker:
    """Get ranker singleton."""
    return Ranker.from_registry(get_synonym_registry())


@lru_cache
def get_answer_composer() -> AnswerComposer:
    """Get QA composer singleton."""
    settings = get_settings()
    return AnswerComposer(
        get_ranker(),
        result_limit=settings.qa_result_limit,
        window_size=settings.qa_window_size,
        snippet_length=settings.qa_snippet_length,
        empty_answer=settings.qa_empty_answer,
    )


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    repo = get_sqlite_repository()
    await repo.initialize()

    # Fail fast on a broken synonym file
    registry = get_synonym_registry()
    logger.info("  Synonym classes: %d", len(registry))


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    repo = get_sqlite_repository()
    await repo.close()
