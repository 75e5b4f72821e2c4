"""
Community Routes - Listing, creation and per-community posts.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from globalbuddy.adapters import SQLiteRepository
from globalbuddy.config.errors import NotFoundError
from globalbuddy.interfaces.api.deps import get_sqlite_repository

router = APIRouter()


class CommunityCreate(BaseModel):
    """Community creation body."""

    title: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    description: str | None = None
    language: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_by: str | None = Field(default=None, alias="createdBy")

    model_config = ConfigDict(populate_by_name=True)


class CommunityPostCreate(BaseModel):
    """Post body when the community comes from the path."""

    author_id: str = Field(..., min_length=1, alias="authorId")
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    category: str | None = None

    model_config = ConfigDict(populate_by_name=True)


@router.get("")
async def list_communities(
    country: str | None = None,
    language: str | None = None,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> list[dict[str, Any]]:
    """
    List communities, newest first.

    - **country**: Only this country
    - **language**: This language, or communities without one
    """
    return await repo.list_communities(country=country, language=language)


@router.post("", status_code=201)
async def create_community(
    request: CommunityCreate,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> dict[str, Any]:
    """Create a community."""
    community_id = await repo.insert_community(
        title=request.title,
        country=request.country,
        description=request.description,
        language=request.language,
        tags=request.tags,
        created_by=request.created_by,
    )
    return {"id": community_id, **request.model_dump()}


@router.get("/{community_id}/posts")
async def list_community_posts(
    community_id: str,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> list[dict[str, Any]]:
    """Posts of one community, newest first."""
    return await repo.list_community_posts(community_id)


@router.post("/{community_id}/posts", status_code=201)
async def create_community_post(
    community_id: str,
    request: CommunityPostCreate,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
) -> dict[str, Any]:
    """Create a post in an existing community."""
    if await repo.get_community(community_id) is None:
        raise NotFoundError("Community not found", details={"id": community_id})

    post_id = await repo.insert_post(
        community_id=community_id,
        author_id=request.author_id,
        title=request.title,
        body=request.body,
        tags=request.tags,
        category=request.category,
    )
    return {"id": post_id, "community_id": community_id, **request.model_dump()}
