"""
API Routes.
"""

from . import communities, health, nlp, posts, search

__all__ = ["health", "posts", "communities", "search", "nlp"]
