"""
Category and brand endpoints.

Both entities carry an English name (required) and a Chinese name
(optional), so one controller serves both, configured per subclass.
"""

from __future__ import annotations

from typing import ClassVar

from ..http import DELETE, GET, PATCH, POST, Controller, Request, Response
from ..services import BrandService, CategoryService, SoftDeleteService
from .base import identifier, optional, require, respond, snake_case


class NamedEntityController(Controller):
    label: ClassVar[str]        # "Category"
    name_field: ClassVar[str]   # "categoryName" -> categoryNameEn / categoryNameZh

    def __init__(self, service: SoftDeleteService):
        self.service = service

    def _names(self, data, message: str) -> dict:
        en, zh = f"{self.name_field}En", f"{self.name_field}Zh"
        return {
            snake_case(en): require(data, en, message),
            snake_case(zh): optional(data, zh, message),
        }

    @GET()
    async def list(self, request: Request) -> Response:
        """All Active records, or the one with ``?id=``."""
        params = request.query_params
        order_by = params.get("orderBy")
        result = await self.service.get(
            params.get("id"),
            order_by=snake_case(order_by) if order_by else None,
            order=params.get("order"),
        )
        key = self.service.payload_key
        return respond(result, body=lambda r: {key: r.get(key)})

    @POST()
    async def create(self, request: Request) -> Response:
        data, _ = await request.data()
        names = self._names(data, f"{self.label} name is not provided")
        result = await self.service.create(**names)
        return respond(result, 201, message=f"{self.label} Created")

    @PATCH()
    async def update(self, request: Request) -> Response:
        data, _ = await request.data()
        message = f"Please provide updated {self.label.lower()} information"
        key = identifier(data, "id", message)
        result = await self.service.update(key, **self._names(data, message))
        return respond(result, message=f"{self.label} updated")

    @DELETE()
    async def delete(self, request: Request) -> Response:
        data, _ = await request.data()
        key = identifier(data, "id", f"{self.label} Id is not provided")
        result = await self.service.delete(key)
        return respond(result, message=f"{self.label} Deleted")


class CategoryController(NamedEntityController):
    prefix = "/category"
    tags = ["Catalog"]
    label = "Category"
    name_field = "categoryName"

    def __init__(self, categories: CategoryService):
        super().__init__(categories)


class BrandController(NamedEntityController):
    prefix = "/brand"
    tags = ["Catalog"]
    label = "Brand"
    name_field = "brandName"

    def __init__(self, brands: BrandService):
        super().__init__(brands)
