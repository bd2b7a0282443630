"""
Category and brand services.
"""

from __future__ import annotations

import logging

from ..models import Brand, Category
from .base import SoftDeleteService, sortable_fields


class CategoryService(SoftDeleteService):
    """Categories, unique by English name (case-insensitive, Active only)."""

    model = Category
    label = "Category"
    noun = "category"
    payload_key = "categories"
    unique_field = "category_name_en"
    sortable = sortable_fields(Category)

    logger = logging.getLogger("showroom.services.category")


class BrandService(SoftDeleteService):
    """Brands, unique by English name (case-insensitive, Active only)."""

    model = Brand
    label = "Brand"
    noun = "brand"
    payload_key = "brands"
    unique_field = "brand_name_en"
    sortable = sortable_fields(Brand)

    logger = logging.getLogger("showroom.services.brand")
