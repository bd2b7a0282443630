"""
Category and brand services: uniqueness, soft delete, listing.
"""

import logging
from unittest import mock

import pytest

from showroom.faults import ErrorKind, QueryFault
from showroom.models import Category, Status


class TestCreate:

    @pytest.mark.asyncio
    async def test_create(self, categories, store):
        result = await categories.create(category_name_en="TV", category_name_zh="電視")
        assert result.ok
        category = await store.find_by_id(Category, result.get("id"))
        assert category.category_name_zh == "電視"
        assert category.status is Status.ACTIVE

    @pytest.mark.asyncio
    async def test_duplicate_is_case_insensitive(self, categories):
        await categories.create(category_name_en="TV")
        result = await categories.create(category_name_en="tv")
        assert result.kind is ErrorKind.CONFLICT
        assert result.error_message == "Category already exists"

    @pytest.mark.asyncio
    async def test_name_reusable_after_delete(self, brands):
        first = await brands.create(brand_name_en="Sony")
        await brands.delete(first.get("id"))
        second = await brands.create(brand_name_en="Sony")
        assert second.ok
        assert second.get("id") != first.get("id")

    @pytest.mark.asyncio
    async def test_store_failure_is_internal(self, categories, store, caplog):
        with mock.patch.object(store, "create", side_effect=QueryFault("Category", "insert", "disk full")):
            with caplog.at_level(logging.ERROR, logger="showroom.services.category"):
                result = await categories.create(category_name_en="TV")
        assert result.kind is ErrorKind.INTERNAL
        assert result.error_message == "Error Occurs"
        assert "CategoryService.create failed" in caplog.text


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update(self, brands, store):
        created = await brands.create(brand_name_en="Sony")
        result = await brands.update(created.get("id"), brand_name_en="SONY", brand_name_zh="索尼")
        assert result.ok
        brand = await store.find_by_id(type(brands).model, created.get("id"))
        assert (brand.brand_name_en, brand.brand_name_zh) == ("SONY", "索尼")

    @pytest.mark.asyncio
    async def test_update_missing_or_deleted(self, brands):
        created = await brands.create(brand_name_en="Sony")
        await brands.delete(created.get("id"))
        for key in (created.get("id"), 999, "abc"):
            result = await brands.update(key, brand_name_en="X")
            assert result.kind is ErrorKind.NOT_FOUND
            assert result.error_message == "Brand does not exist"


class TestGet:

    @pytest.mark.asyncio
    async def test_get_by_id(self, categories):
        created = await categories.create(category_name_en="TV")
        result = await categories.get(created.get("id"))
        assert [c["categoryNameEn"] for c in result.get("categories")] == ["TV"]

    @pytest.mark.asyncio
    async def test_deleted_excluded(self, categories):
        tv = await categories.create(category_name_en="TV")
        await categories.create(category_name_en="Audio")
        await categories.delete(tv.get("id"))

        listing = await categories.get()
        assert [c["categoryNameEn"] for c in listing.get("categories")] == ["Audio"]

        by_id = await categories.get(tv.get("id"))
        assert by_id.kind is ErrorKind.NOT_FOUND
        assert by_id.error_message == "No category found"

    @pytest.mark.asyncio
    async def test_empty_listing_is_not_found(self, brands):
        result = await brands.get()
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error_message == "No brand found"

    @pytest.mark.asyncio
    async def test_sorting(self, categories):
        for name in ("b", "c", "a"):
            await categories.create(category_name_en=name)

        default = await categories.get()
        assert [c["categoryNameEn"] for c in default.get("categories")] == ["b", "c", "a"]

        desc = await categories.get(order_by="category_name_en", order="DESC")
        assert [c["categoryNameEn"] for c in desc.get("categories")] == ["c", "b", "a"]

    @pytest.mark.asyncio
    async def test_invalid_sort(self, categories):
        await categories.create(category_name_en="TV")

        bad_key = await categories.get(order_by="colour")
        assert bad_key.kind is ErrorKind.VALIDATION_FAILED
        assert bad_key.error_message == "Invalid sort key 'colour'"

        bad_order = await categories.get(order="sideways")
        assert bad_order.kind is ErrorKind.VALIDATION_FAILED
        assert bad_order.error_message == "Invalid sort order 'sideways'"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, categories, store):
        created = await categories.create(category_name_en="TV")
        assert (await categories.delete(created.get("id"))).ok
        row = await store.find_by_id(Category, created.get("id"))
        assert row.status is Status.DELETED

    @pytest.mark.asyncio
    async def test_missing_and_deleted_report_identically(self, categories):
        created = await categories.create(category_name_en="TV")
        await categories.delete(created.get("id"))

        again = await categories.delete(created.get("id"))
        missing = await categories.delete(12345)
        assert again == missing
        assert again.kind is ErrorKind.NOT_FOUND
        assert again.error_message == "No category found"
