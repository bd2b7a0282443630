"""
Catalog entities: Role, User, Category, Brand, Product.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .base import Record, relation


@dataclass(kw_only=True, eq=False)
class Role(Record):
    __table__ = "roles"
    __json_fields__ = ("end_points",)

    role_id: int
    role_name: str
    end_points: List[str] = field(default_factory=list)


@dataclass(kw_only=True, eq=False)
class User(Record):
    """Back-office account. ``roles`` holds Role ids captured at creation."""

    __table__ = "users"
    __json_fields__ = ("roles",)
    __hidden__ = ("password", "roles")

    user_id: str
    password: Optional[str] = None
    roles: List[int] = field(default_factory=list)


@dataclass(kw_only=True, eq=False)
class Category(Record):
    __table__ = "categories"

    category_name_en: str
    category_name_zh: Optional[str] = None


@dataclass(kw_only=True, eq=False)
class Brand(Record):
    __table__ = "brands"

    brand_name_en: str
    brand_name_zh: Optional[str] = None


@dataclass(kw_only=True, eq=False)
class Product(Record):
    """
    Catalog product.

    ``category`` and ``brand`` are not persisted; they hold the referenced
    records once ``EntityStore.populate`` has materialised them.
    """

    __table__ = "products"
    __relations__ = {
        "category": ("category_id", Category),
        "brand": ("brand_id", Brand),
    }
    __wire_names__ = {"category_id": "category", "brand_id": "brand"}

    model_no: str
    price: float
    prod_desc_en: str
    prod_name_en: str
    category_id: int
    brand_id: int
    discount_price: Optional[float] = None
    prod_desc_zh: Optional[str] = None
    prod_name_zh: Optional[str] = None
    image_url: Optional[str] = None
    release_date: Optional[str] = None

    category: Optional[Category] = relation()
    brand: Optional[Brand] = relation()


ALL_MODELS = (Role, User, Category, Brand, Product)
