"""
Ranker - Score, filter, stable-sort and truncate a document collection.

Features:
- One query bag per call, one target bag per document
- Documents scoring exactly 0 are dropped
- Ties keep their input order (callers pass newest first)
- Works on any document shape through a text selector
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from .bag import SemanticBagBuilder
from .models import ScoredResult
from .registry import SynonymRegistry
from .scorer import score

logger = logging.getLogger(__name__)

__all__ = ["Ranker"]

T = TypeVar("T")


class Ranker:
    """
    Lexical-semantic ranker over arbitrary documents.

    Example:
        >>> ranker = Ranker.from_registry(SynonymRegistry.default())
        >>> results = ranker.rank("租房", posts, post_text, limit=10)
    """

    def __init__(self, bag_builder: SemanticBagBuilder) -> None:
        """
        Initialize ranker.

        Args:
            bag_builder: Builder shared by query and documents
        """
        self._bags = bag_builder

    @classmethod
    def from_registry(cls, registry: SynonymRegistry) -> Ranker:
        return cls(SemanticBagBuilder(registry))

    @property
    def bag_builder(self) -> SemanticBagBuilder:
        return self._bags

    def rank(
        self,
        query_text: str | None,
        documents: Iterable[T],
        text_selector: Callable[[T], str],
        limit: int | None = None,
    ) -> list[ScoredResult[T]]:
        """
        Rank documents against a free-text query.

        Args:
            query_text: Caller-supplied query
            documents: Documents in caller order (ties resolve to this order)
            text_selector: Extracts the matchable text of a document
            limit: Keep at most this many results after sorting

        Returns:
            Results with score > 0, highest score first
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        query_bag = self._bags.build(query_text)

        scored: list[tuple[int, ScoredResult[T]]] = []
        if query_bag:
            for position, document in enumerate(documents):
                value = score(query_bag, self._bags.build(text_selector(document)))
                if value > 0:
                    scored.append((position, ScoredResult(document=document, score=value)))

        # Input position as secondary key makes tie order explicit
        scored.sort(key=lambda item: (-item[1].score, item[0]))
        results = [result for _, result in scored]
        if limit is not None:
            results = results[:limit]

        logger.debug(
            "Ranked query_len=%d bag=%d -> %d results (limit=%s)",
            len(query_text or ""),
            len(query_bag),
            len(results),
            limit,
        )
        return results
