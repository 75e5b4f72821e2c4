"""
Text selectors - What text of each document kind is matched against.

Selectors accept storage rows (mappings) or model objects alike.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = ["post_text", "community_text"]


def _field_text(document: Any, name: str) -> str:
    if isinstance(document, Mapping):
        value = document.get(name)
    else:
        value = getattr(document, name, None)

    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def post_text(post: Any) -> str:
    """Title and body."""
    return f"{_field_text(post, 'title')} {_field_text(post, 'body')}"


def community_text(community: Any) -> str:
    """Title, description and tags."""
    parts = (
        _field_text(community, "title"),
        _field_text(community, "description"),
        _field_text(community, "tags"),
    )
    return " ".join(part for part in parts if part)
