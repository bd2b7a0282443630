"""
Showroom database layer.

Async SQLite engine (aiosqlite) with scoped transactions.
"""

from .engine import Database

__all__ = ["Database"]
