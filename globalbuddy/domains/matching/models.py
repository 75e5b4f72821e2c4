"""
Matching Models - Data types for the matching domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

# A normalized word unit: lowercase letters/digits only
Token = str

# De-duplicated tokens of a text plus everything reachable through synonym classes
SemanticBag = frozenset[str]


class Document(BaseModel):
    """Searchable document supplied by storage (a post, in practice)."""

    id: str
    title: str = ""
    body: str = ""

    model_config = {"frozen": True, "extra": "ignore"}


@dataclass(frozen=True)
class ScoredResult(Generic[T]):
    """A document paired with its score in [0.0, 1.0]."""

    document: T
    score: float
