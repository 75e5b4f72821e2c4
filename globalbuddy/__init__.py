"""
GlobalBuddy - community platform backend for students studying abroad.

Example:
    >>> from globalbuddy.domains.matching import Ranker, SynonymRegistry
    >>> ranker = Ranker.from_registry(SynonymRegistry.default())
    >>> results = ranker.rank("租房", posts, post_text)
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
