"""
Domains - Business logic layer.

Each domain is self-contained with:
- contracts.py: Interfaces (Protocol classes), where needed
- models.py: Data models
- Implementation files
- test_*.py beside the code
"""

__all__ = [
    "matching",
    "qa",
]
