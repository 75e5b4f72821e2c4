"""
Tokenizer - Normalize raw text into word tokens.

Pipeline:
1. Lowercase
2. Replace anything that is not a letter, digit or whitespace with a space
3. Split on whitespace runs, dropping empty strings

No stemming and no stop-word removal: the synonym table is the only
normalization beyond case.
"""

from __future__ import annotations

import re
import unicodedata

__all__ = ["tokenize", "is_unsegmented"]

# \w also matches "_", which is neither a letter nor a digit
_NON_WORD = re.compile(r"[^\w\s]|_")

# Scripts written without spaces between words
_UNSEGMENTED_SCRIPTS = ("CJK ", "HIRAGANA ", "KATAKANA ", "THAI ")


def tokenize(text: str | None) -> list[str]:
    """
    Split text into lowercase letter/digit tokens, in source order.

    Examples:
        >>> tokenize("Visa, Rent & FOOD!")
        ['visa', 'rent', 'food']

        >>> tokenize("推荐在 BTS 线附近找公寓，注意押金")
        ['推荐在', 'bts', '线附近找公寓', '注意押金']

        >>> tokenize(None)
        []
    """
    if not text:
        return []
    return _NON_WORD.sub(" ", text.lower()).split()


def is_unsegmented(token: str) -> bool:
    """True when every character of the token belongs to a script without word spacing."""
    return bool(token) and all(
        unicodedata.name(char, "").startswith(_UNSEGMENTED_SCRIPTS) for char in token
    )
