"""
Matching Contracts - Interfaces for the matching domain.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from .models import ScoredResult, SemanticBag


@runtime_checkable
class BagBuilder(Protocol):
    """Contract for turning text into a semantic bag."""

    def build(self, text: str | None) -> SemanticBag:
        """Tokenize and expand a text."""
        ...


@runtime_checkable
class DocumentRanker(Protocol):
    """Contract for ranking implementations."""

    def rank(
        self,
        query_text: str | None,
        documents: Iterable[Any],
        text_selector: Callable[[Any], str],
        limit: int | None = None,
    ) -> list[ScoredResult[Any]]:
        """Score, filter and order documents."""
        ...
