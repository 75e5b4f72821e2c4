"""
Post Routes - Listing (optionally relevance-ranked), lookup and creation.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool

from globalbuddy.adapters import SQLiteRepository
from globalbuddy.config.errors import NotFoundError
from globalbuddy.domains.matching import Ranker, post_text
from globalbuddy.interfaces.api.deps import get_ranker, get_sqlite_repository

logger = logging.getLogger(__name__)

router = APIRouter()


class PostCreate(BaseModel):
    """Post creation body."""

    community_id: str = Field(..., min_length=1, alias="communityId")
    author_id: str = Field(..., min_length=1, alias="authorId")
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    category: str | None = None

    model_config = ConfigDict(populate_by_name=True)


@router.get("")
async def list_posts(
    q: str | None = Query(default=None, description="Relevance query"),
    repo: SQLiteRepository = Depends(get_sqlite_repository),
    ranker: Ranker = Depends(get_ranker),
) -> list[dict[str, Any]]:
    """
    List posts.

    - Without **q**: every post, newest first
    - With **q**: posts with a positive score, best first, each with a `score`
    """
    posts = await repo.list_posts()
    if not q:
        return posts

    results = await run_in_threadpool(ranker.rank, q, posts, post_text)

    logger.info("Post listing: query='%s' -> %d of %d posts", q[:50], len(results), len(posts))
    return [{**result.document, "score": result.score} for result in results]


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> dict[str, Any]:
    """Get one post."""
    post = await repo.get_post(post_id)
    if post is None:
        raise NotFoundError("Post not found", details={"id": post_id})
    return post


@router.post("", status_code=201)
async def create_post(
    request: PostCreate,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> dict[str, Any]:
    """Create a post in a community."""
    post_id = await repo.insert_post(
        community_id=request.community_id,
        author_id=request.author_id,
        title=request.title,
        body=request.body,
        tags=request.tags,
        category=request.category,
    )
    return {"id": post_id, **request.model_dump()}
