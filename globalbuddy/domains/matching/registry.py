"""
Synonym Registry - Immutable table of synonym classes.

Built once at startup and passed by reference into the bag builder. A token
may belong to several classes, so lookups go through a multi-map.

Usage:
    registry = SynonymRegistry.from_mapping({"housing": ["租房", "公寓"]})
    registry.classes_containing("公寓")
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError, field_validator

from globalbuddy.config.errors import ConfigurationError
from globalbuddy.config.synonyms import DEFAULT_SYNONYM_CLASSES

from .tokenizer import is_unsegmented, tokenize

if TYPE_CHECKING:
    from globalbuddy.config.settings import Settings

logger = logging.getLogger(__name__)

__all__ = ["SynonymClass", "SynonymRegistry"]


class SynonymClass(BaseModel):
    """A named, closed set of interchangeable tokens."""

    name: str
    terms: tuple[str, ...]

    model_config = {"frozen": True}

    @field_validator("terms", mode="before")
    @classmethod
    def _normalize_terms(cls, value: Iterable[str]) -> tuple[str, ...]:
        normalized: dict[str, None] = {}
        for term in value:
            tokens = tokenize(term)
            if len(tokens) != 1:
                raise ValueError(f"synonym term must be a single token: {term!r}")
            normalized[tokens[0]] = None
        if not normalized:
            raise ValueError("synonym class must contain at least one term")
        return tuple(normalized)

    def __contains__(self, token: object) -> bool:
        return token in self.terms


class SynonymRegistry:
    """
    Read-only collection of synonym classes.

    Example:
        >>> registry = SynonymRegistry.default()
        >>> [c.name for c in registry.classes_containing("公寓")]
        ['housing']
    """

    def __init__(self, classes: Iterable[SynonymClass]) -> None:
        self._classes = tuple(classes)

        names = [synonym_class.name for synonym_class in self._classes]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(
                "Duplicate synonym class names",
                details={"names": duplicates},
            )

        index: dict[str, list[SynonymClass]] = defaultdict(list)
        for synonym_class in self._classes:
            for term in synonym_class.terms:
                index[term].append(synonym_class)

        self._index: Mapping[str, frozenset[SynonymClass]] = MappingProxyType(
            {term: frozenset(members) for term, members in index.items()}
        )
        # Terms that can be spotted inside longer tokens of unspaced text
        self._spottable = tuple(term for term in self._index if is_unsegmented(term))

    @property
    def classes(self) -> tuple[SynonymClass, ...]:
        return self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[SynonymClass]:
        return iter(self._classes)

    def classes_containing(self, token: str) -> frozenset[SynonymClass]:
        """Every class the token belongs to (possibly none, possibly several)."""
        return self._index.get(token, frozenset())

    def spot_terms(self, token: str) -> list[str]:
        """
        Registry terms embedded in a longer token of unspaced text.

        "线附近找公寓" contains "公寓". Latin-script terms are never spotted,
        so "rent" is not found inside "parent".
        """
        return [term for term in self._spottable if term != token and term in token]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> SynonymRegistry:
        """Build a registry from a class name -> terms mapping."""
        classes = []
        for name, terms in mapping.items():
            try:
                classes.append(SynonymClass(name=name, terms=tuple(terms)))
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid synonym class '{name}'",
                    details={"errors": [err["msg"] for err in e.errors()]},
                ) from e
        return cls(classes)

    @classmethod
    def from_json(cls, path: str | Path) -> SynonymRegistry:
        """Load a registry from a JSON object of class name -> list of terms."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read synonym file: {path}",
                details={"reason": str(e)},
            ) from e

        if not isinstance(data, dict) or not all(
            isinstance(terms, list) for terms in data.values()
        ):
            raise ConfigurationError(
                "Synonym file must map class names to lists of terms",
                details={"path": str(path)},
            )

        registry = cls.from_mapping(data)
        logger.info("Loaded %d synonym classes from %s", len(registry), path)
        return registry

    @classmethod
    def default(cls) -> SynonymRegistry:
        """Registry with the built-in classes."""
        return cls.from_mapping(DEFAULT_SYNONYM_CLASSES)

    @classmethod
    def from_settings(cls, settings: Settings) -> SynonymRegistry:
        """The configured synonym file if one is set, else the built-in classes."""
        if settings.synonyms_path:
            return cls.from_json(settings.synonyms_path)
        return cls.default()
