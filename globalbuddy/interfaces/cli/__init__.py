"""
CLI Interface - Command-line tools for GlobalBuddy.

Provides commands for:
- Database setup and demo data
- Search and ranked post listings
- Question answering
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
