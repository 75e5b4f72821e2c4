"""
Semantic Bag Builder - Tokens plus synonym expansion, as a set.
"""

from __future__ import annotations

from .models import SemanticBag
from .registry import SynonymRegistry
from .tokenizer import tokenize

__all__ = ["SemanticBagBuilder"]


class SemanticBagBuilder:
    """
    Expand a text into its semantic bag.

    Every distinct token is kept. Each token, and each registry term spotted
    inside it, pulls in all members of every class containing it. Repeats and
    overlapping classes never add more than one entry per distinct token.

    Example:
        >>> builder = SemanticBagBuilder(SynonymRegistry.default())
        >>> "餐馆" in builder.build("吃饭")
        True
        >>> "餐馆" in builder.build("今天去哪里吃饭")
        True
        >>> "rent" in builder.build("parent meeting")
        False
    """

    def __init__(self, registry: SynonymRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> SynonymRegistry:
        return self._registry

    def build(self, text: str | None) -> SemanticBag:
        tokens = tokenize(text)
        bag = set(tokens)

        for token in dict.fromkeys(tokens):
            for concept in (token, *self._registry.spot_terms(token)):
                for synonym_class in self._registry.classes_containing(concept):
                    bag.update(synonym_class.terms)

        return frozenset(bag)
