"""
Menu - category -> brand -> product count aggregation.

For every Active category, in natural order, the Active products of that
category are fetched with their brand and grouped by brand id in first-seen
order::

    [
        {"category": {...}, "count": 3,
         "brands": [{"brand": {...}, "count": 2}, {"brand": {...}, "count": 1}]},
        {"category": {...}, "count": 0, "brands": []},
    ]
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from ..faults import ServiceResult
from ..models import Category, EntityStore, Product, Status
from .base import operation

NO_DATA = "No Data Found"


@contextmanager
def timed(logger: logging.Logger, phase: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"{phase} took {time.perf_counter() - start:.4f}s")


def group_by_brand(products: List[Product]) -> List[Dict[str, Any]]:
    """``[{brand, count}]`` per distinct brand id, in first-seen order."""
    groups: Dict[int, Dict[str, Any]] = {}
    for product in products:
        group = groups.get(product.brand_id)
        if group is None:
            brand = product.brand.to_dict() if product.brand is not None else None
            group = groups[product.brand_id] = {"brand": brand, "count": 0}
        group["count"] += 1
    return list(groups.values())


class MenuService:
    logger = logging.getLogger("showroom.services.menu")

    def __init__(self, store: EntityStore):
        self.store = store

    @operation
    async def compute_menu(self) -> ServiceResult:
        with timed(self.logger, "Fetching categories"):
            categories = await self.store.find(Category, status=Status.ACTIVE)
        if not categories:
            return ServiceResult.not_found(NO_DATA)

        menu: List[Dict[str, Any]] = []
        for category in categories:
            with timed(self.logger, f"Fetching products of category {category.id}"):
                products = await self.store.find(
                    Product, category_id=category.id, status=Status.ACTIVE
                )
                await self.store.populate(products, "brand")

            with timed(self.logger, f"Grouping category {category.id}"):
                menu.append({
                    "category": category.to_dict(),
                    "count": len(products),
                    "brands": group_by_brand(products),
                })

        if not menu:
            return ServiceResult.not_found(NO_DATA)
        return ServiceResult.success(menu=menu)
