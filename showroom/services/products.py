"""
Product service.

Create and update resolve the category and brand references and store the
product image (when one is sent) before anything is written.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..faults import ServiceResult
from ..models import EntityStore, Product, primary_key, utcnow
from ..uploads import ImageStore, UploadFile
from .base import Prepared, SoftDeleteService, operation, sortable_fields
from .references import ReferenceResolver


class ProductService(SoftDeleteService):
    """Products, unique by model number (exact match, Active only)."""

    model = Product
    label = "Product"
    noun = "Product"
    payload_key = "products"
    unique_field = "model_no"
    unique_lookup = ""
    sortable = sortable_fields(Product)

    logger = logging.getLogger("showroom.services.product")

    def __init__(self, store: EntityStore, images: ImageStore):
        super().__init__(store)
        self.images = images
        self.references = ReferenceResolver(store)

    async def _resolve(self, fields: Dict[str, Any]) -> Prepared:
        category = await self.references.category(fields.get("category_id"))
        if category is None:
            return ServiceResult.conflict("Category does not exist")
        brand = await self.references.brand(fields.get("brand_id"))
        if brand is None:
            return ServiceResult.conflict("Brand does not exist")
        return {**fields, "category_id": category.id, "brand_id": brand.id}

    async def _upload(self, image: Optional[UploadFile]) -> Optional[str]:
        if image is None:
            return None
        stored = await self.images.upload(await image.read(), image.content_type)
        self.logger.debug(f"Image stored at {stored.url}")
        return stored.url

    async def prepare_create(self, fields: Dict[str, Any]) -> Prepared:
        image = fields.pop("image", None)
        prepared = await self._resolve(fields)
        if isinstance(prepared, ServiceResult):
            return prepared
        prepared["image_url"] = await self._upload(image)
        prepared["release_date"] = utcnow()
        return prepared

    async def prepare_update(self, record: Product, fields: Dict[str, Any]) -> Prepared:
        image = fields.pop("image", None)
        prepared = await self._resolve(fields)
        if isinstance(prepared, ServiceResult):
            return prepared
        if image is not None:
            prepared["image_url"] = await self._upload(image)
        return prepared

    @operation
    async def get(
        self,
        key: Any = None,
        *,
        category_id: Any = None,
        brand_id: Any = None,
        order_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> ServiceResult:
        """Products by id, or all Active products optionally filtered by category / brand."""
        filters: Dict[str, Any] = {}
        for name, value in (("category_id", category_id), ("brand_id", brand_id)):
            if value is None or value == "":
                continue
            filters[name] = primary_key(value)
            if filters[name] is None:
                return ServiceResult.not_found(self.none_found)
        return await self._get(key, order_by, order, filters)
