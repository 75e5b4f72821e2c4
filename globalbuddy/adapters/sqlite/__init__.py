"""
SQLite adapter - Community and post storage.
"""

from .repository import SQLiteRepository
from .seed import SEED_COMMUNITIES, seed_database

__all__ = ["SQLiteRepository", "SEED_COMMUNITIES", "seed_database"]
