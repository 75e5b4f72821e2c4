"""
Search Routes - Combined post and community search.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from globalbuddy.adapters import SQLiteRepository
from globalbuddy.config import Settings, get_settings
from globalbuddy.config.errors import SearchError
from globalbuddy.domains.matching import Ranker, ScoredResult, community_text, post_text
from globalbuddy.interfaces.api.deps import get_ranker, get_sqlite_repository

logger = logging.getLogger(__name__)

router = APIRouter()


class SearchResponse(BaseModel):
    """Search response."""

    query: str
    posts: list[dict[str, Any]]
    communities: list[dict[str, Any]]


def _with_scores(results: list[ScoredResult[dict[str, Any]]]) -> list[dict[str, Any]]:
    return [{**result.document, "score": result.score} for result in results]


@router.get("", response_model=SearchResponse)
async def search(
    q: str | None = Query(default=None, description="Search query"),
    repo: SQLiteRepository = Depends(get_sqlite_repository),
    ranker: Ranker = Depends(get_ranker),
    settings: Settings = Depends(get_settings),
) -> SearchResponse:
    """
    Search posts and communities.

    - **q**: Free-text query (required)

    Returns at most `search_result_limit` matches of each kind, best first.
    """
    if not q or not q.strip():
        raise SearchError("Missing search query 'q'")

    posts = await repo.list_posts()
    communities = await repo.list_communities()
    limit = settings.search_result_limit

    post_results = await run_in_threadpool(ranker.rank, q, posts, post_text, limit)
    community_results = await run_in_threadpool(
        ranker.rank, q, communities, community_text, limit
    )

    logger.info(
        "Search: query='%s' -> posts=%d communities=%d",
        q[:50],
        len(post_results),
        len(community_results),
    )

    return SearchResponse(
        query=q,
        posts=_with_scores(post_results),
        communities=_with_scores(community_results),
    )
