"""
Scorer - Fraction of query concepts recoverable in a target.
"""

from __future__ import annotations

from collections.abc import Set

from .bag import SemanticBagBuilder

__all__ = ["score", "score_texts"]


def score(query: Set[str], target: Set[str]) -> float:
    """
    Overlap score in [0.0, 1.0]: |query ∩ target| / max(1, |query|).

    Asymmetric on purpose: a short query fully present in a long target
    scores 1.0. An empty query scores 0.0 against anything.
    """
    return len(query & target) / max(1, len(query))


def score_texts(query_text: str | None, target_text: str | None, builder: SemanticBagBuilder) -> float:
    """Score two raw texts through the same bag builder."""
    return score(builder.build(query_text), builder.build(target_text))
