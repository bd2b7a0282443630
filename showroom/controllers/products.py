"""
Product endpoints. Create and update accept ``multipart/form-data`` with an
optional ``image`` file part.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..faults import UnsupportedMediaTypeFault
from ..http import DELETE, GET, PATCH, POST, Controller, Request, Response, ValidationFault
from ..services import ProductService
from ..uploads import UploadFile, image_extension
from .base import blank, identifier, number, optional, require, respond, snake_case


class ProductController(Controller):
    prefix = "/product"
    tags = ["Catalog"]

    def __init__(self, products: ProductService):
        self.products = products

    def _fields(self, data: Mapping[str, Any], image: Optional[UploadFile]) -> Dict[str, Any]:
        """Validated product fields, in the order the checks are reported."""
        model_no = require(data, "modelNo", "Model No is not provided")
        price = number(data.get("price"), "Price is not provided")
        prod_desc_en = require(data, "prodDescEn", "Product description is not provided")
        prod_name_en = require(data, "prodNameEn", "Product name is not provided")
        category_id = identifier(data, "categoryId", "Product category is not provided")
        brand_id = identifier(data, "brandId", "Product brand is not provided")

        discount_price = data.get("discountPrice")
        if blank(discount_price):
            discount_price = None
        else:
            discount_price = number(discount_price, "Discount price is not a number")
            if discount_price > price:
                raise ValidationFault("Price is smaller than discount price")

        if image is not None:
            try:
                image_extension(image.content_type)
            except UnsupportedMediaTypeFault as fault:
                raise ValidationFault(fault.message, content_type=image.content_type)

        return {
            "model_no": model_no,
            "price": price,
            "discount_price": discount_price,
            "prod_desc_en": prod_desc_en,
            "prod_desc_zh": optional(data, "prodDescZh", "Product description is not valid"),
            "prod_name_en": prod_name_en,
            "prod_name_zh": optional(data, "prodNameZh", "Product name is not valid"),
            "category_id": category_id,
            "brand_id": brand_id,
            "image": image,
        }

    @GET()
    async def list(self, request: Request) -> Response:
        """Products by ``?id=``, or filtered by ``categoryId`` / ``brandId``."""
        params = request.query_params
        order_by = params.get("orderBy")
        result = await self.products.get(
            params.get("id"),
            category_id=params.get("categoryId"),
            brand_id=params.get("brandId"),
            order_by=snake_case(order_by) if order_by else None,
            order=params.get("order"),
        )
        return respond(result, body=lambda r: {"products": r.get("products")})

    @POST()
    async def create(self, request: Request) -> Response:
        data, files = await request.data()
        fields = self._fields(data, files.get("image"))
        result = await self.products.create(**fields)
        return respond(result, 201, message="Product Created")

    @PATCH()
    async def update(self, request: Request) -> Response:
        data, files = await request.data()
        key = identifier(data, "id", "Product Id is not provided")
        fields = self._fields(data, files.get("image"))
        result = await self.products.update(key, **fields)
        return respond(result, message="Product Updated")

    @DELETE()
    async def delete(self, request: Request) -> Response:
        data, _ = await request.data()
        key = identifier(data, "id", "Product Id is not provided")
        result = await self.products.delete(key)
        return respond(result, message="Product Deleted")
