"""
Adapters - External service integrations.

Storage access is wrapped here to keep the domains free of I/O.
"""

from .sqlite import SQLiteRepository, seed_database

__all__ = [
    "SQLiteRepository",
    "seed_database",
]
