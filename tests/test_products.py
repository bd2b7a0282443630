"""
Product service: reference gating, images, filters, atomicity.
"""

from unittest import mock

import pytest

from showroom.faults import ErrorKind, QueryFault
from showroom.models import Product, Status
from showroom.uploads import UploadFile

from tests.conftest import make_catalog, product_fields


def png(name="front.png"):
    return UploadFile(filename=name, content_type="image/png", content=b"\x89PNG...")


class TestCreate:

    @pytest.mark.asyncio
    async def test_create(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        result = await products.create(**product_fields(category_id, brand_id))
        assert result.ok

        product = await store.find_by_id(Product, result.get("id"))
        assert product.category_id == category_id
        assert product.brand_id == brand_id
        assert product.release_date is not None
        assert product.image_url is None

    @pytest.mark.asyncio
    async def test_duplicate_model_no_is_exact(self, products, categories, brands):
        category_id, brand_id = await make_catalog(categories, brands)
        await products.create(**product_fields(category_id, brand_id, model_no="KD-55X"))

        duplicate = await products.create(**product_fields(category_id, brand_id, model_no="KD-55X"))
        assert duplicate.kind is ErrorKind.CONFLICT
        assert duplicate.error_message == "Product already exists"

        other_case = await products.create(**product_fields(category_id, brand_id, model_no="kd-55x"))
        assert other_case.ok

    @pytest.mark.asyncio
    async def test_recreate_after_delete(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        first = await products.create(**product_fields(category_id, brand_id, model_no="KD-55X"))
        assert (await products.delete(first.get("id"))).ok

        again = await products.create(**product_fields(category_id, brand_id, model_no="KD-55X"))
        assert again.ok
        assert again.get("id") != first.get("id")
        active = await store.find(Product, status=Status.ACTIVE)
        assert [product.id for product in active] == [again.get("id")]

        duplicate = await products.create(**product_fields(category_id, brand_id, model_no="KD-55X"))
        assert duplicate.kind is ErrorKind.CONFLICT

    @pytest.mark.asyncio
    async def test_image_upload(self, products, categories, brands, store, images):
        category_id, brand_id = await make_catalog(categories, brands)
        result = await products.create(**product_fields(category_id, brand_id), image=png())
        product = await store.find_by_id(Product, result.get("id"))
        assert product.image_url == "https://images.test/products/1.png"
        assert images.uploads == [b"\x89PNG..."]

    @pytest.mark.asyncio
    async def test_upload_failure_aborts(self, products, categories, brands, store, images):
        category_id, brand_id = await make_catalog(categories, brands)
        images.fail = True
        result = await products.create(**product_fields(category_id, brand_id), image=png())
        assert result.kind is ErrorKind.INTERNAL
        assert await store.count(Product) == 0


class TestReferenceGating:

    @pytest.mark.asyncio
    async def test_missing_category(self, products, categories, brands, store):
        _, brand_id = await make_catalog(categories, brands)
        result = await products.create(**product_fields(999, brand_id))
        assert result.kind is ErrorKind.CONFLICT
        assert result.error_message == "Category does not exist"
        assert await store.count(Product) == 0

    @pytest.mark.asyncio
    async def test_deleted_brand(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        await brands.delete(brand_id)
        result = await products.create(**product_fields(category_id, brand_id))
        assert result.kind is ErrorKind.CONFLICT
        assert result.error_message == "Brand does not exist"
        assert await store.count(Product) == 0

    @pytest.mark.asyncio
    async def test_update_rechecks_references(self, products, categories, brands):
        category_id, brand_id = await make_catalog(categories, brands)
        created = await products.create(**product_fields(category_id, brand_id))
        await categories.delete(category_id)
        result = await products.update(created.get("id"), **product_fields(category_id, brand_id))
        assert result.kind is ErrorKind.CONFLICT
        assert result.error_message == "Category does not exist"

    @pytest.mark.asyncio
    async def test_references_as_strings(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        result = await products.create(**product_fields(str(category_id), str(brand_id)))
        product = await store.find_by_id(Product, result.get("id"))
        assert product.category_id == category_id


class TestAtomicity:

    @pytest.mark.asyncio
    async def test_failure_after_insert_leaves_no_product(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        insert = store.create

        async def insert_then_fail(model, **fields):
            await insert(model, **fields)
            raise QueryFault(model.__name__, "insert", "connection lost")

        with mock.patch.object(store, "create", side_effect=insert_then_fail):
            result = await products.create(**product_fields(category_id, brand_id))

        assert result.kind is ErrorKind.INTERNAL
        assert await store.count(Product) == 0

    @pytest.mark.asyncio
    async def test_failed_update_keeps_previous_values(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        created = await products.create(**product_fields(category_id, brand_id, price=10.0))

        with mock.patch.object(store, "save", side_effect=QueryFault("Product", "save", "locked")):
            result = await products.update(
                created.get("id"), **product_fields(category_id, brand_id, price=20.0)
            )

        assert result.kind is ErrorKind.INTERNAL
        assert (await store.find_by_id(Product, created.get("id"))).price == 10.0


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_keeps_image_without_upload(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        created = await products.create(**product_fields(category_id, brand_id), image=png())

        result = await products.update(
            created.get("id"), **product_fields(category_id, brand_id, prod_name_en="Bravia 55 II")
        )
        assert result.ok
        product = await store.find_by_id(Product, created.get("id"))
        assert product.prod_name_en == "Bravia 55 II"
        assert product.image_url == "https://images.test/products/1.png"

    @pytest.mark.asyncio
    async def test_update_replaces_image(self, products, categories, brands, store):
        category_id, brand_id = await make_catalog(categories, brands)
        created = await products.create(**product_fields(category_id, brand_id), image=png())
        await products.update(created.get("id"), **product_fields(category_id, brand_id), image=png("back.png"))
        product = await store.find_by_id(Product, created.get("id"))
        assert product.image_url == "https://images.test/products/2.png"

    @pytest.mark.asyncio
    async def test_update_deleted(self, products, categories, brands):
        category_id, brand_id = await make_catalog(categories, brands)
        created = await products.create(**product_fields(category_id, brand_id))
        await products.delete(created.get("id"))
        result = await products.update(created.get("id"), **product_fields(category_id, brand_id))
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error_message == "Product does not exist"


class TestGet:

    @pytest.mark.asyncio
    async def test_filters(self, products, categories, brands):
        tv, sony = await make_catalog(categories, brands)
        audio, lg = await make_catalog(categories, brands, category="Audio", brand="LG")
        await products.create(**product_fields(tv, sony, model_no="1"))
        await products.create(**product_fields(tv, lg, model_no="2"))
        await products.create(**product_fields(audio, sony, model_no="3"))

        by_category = await products.get(category_id=tv)
        assert [p["modelNo"] for p in by_category.get("products")] == ["1", "2"]

        by_both = await products.get(category_id=str(tv), brand_id=str(sony))
        assert [p["modelNo"] for p in by_both.get("products")] == ["1"]

        by_model = await products.get(order_by="model_no", order="desc")
        assert [p["modelNo"] for p in by_model.get("products")] == ["3", "2", "1"]

    @pytest.mark.asyncio
    async def test_bad_filter_is_not_found(self, products, categories, brands):
        tv, sony = await make_catalog(categories, brands)
        await products.create(**product_fields(tv, sony))
        result = await products.get(category_id="tv")
        assert result.kind is ErrorKind.NOT_FOUND
        assert result.error_message == "No Product found"

    @pytest.mark.asyncio
    async def test_deleted_excluded(self, products, categories, brands, store):
        tv, sony = await make_catalog(categories, brands)
        created = await products.create(**product_fields(tv, sony))
        await products.delete(created.get("id"))
        assert (await products.get()).kind is ErrorKind.NOT_FOUND
        assert (await products.get(created.get("id"))).kind is ErrorKind.NOT_FOUND
        assert (await store.find_by_id(Product, created.get("id"))).status is Status.DELETED

    @pytest.mark.asyncio
    async def test_wire_shape(self, products, categories, brands):
        tv, sony = await make_catalog(categories, brands)
        created = await products.create(**product_fields(tv, sony))
        [product] = (await products.get(created.get("id"))).get("products")
        assert product["category"] == tv
        assert product["brand"] == sony
        assert product["discountPrice"] == 899.0
        assert product["status"] == "A"
