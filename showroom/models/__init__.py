"""
Showroom models - catalog entities and the entity store.
"""

from .base import Record, Status, primary_key, utcnow
from .entities import ALL_MODELS, Brand, Category, Product, Role, User
from .store import EntityStore

__all__ = [
    "Record",
    "Status",
    "primary_key",
    "utcnow",
    "ALL_MODELS",
    "Brand",
    "Category",
    "Product",
    "Role",
    "User",
    "EntityStore",
]
