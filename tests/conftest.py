"""
Shared test fixtures and helpers for the Showroom test suite.

Every test gets its own in-memory SQLite database.
"""

from typing import List

import httpx
import pytest
import pytest_asyncio

from showroom.app import create_app
from showroom.auth import PasswordHasher, TokenSigner
from showroom.config import Settings
from showroom.db import Database
from showroom.faults import UploadFault
from showroom.mail import ConsoleProvider
from showroom.models import EntityStore
from showroom.services import (
    AuthService,
    BrandService,
    CategoryService,
    ContactService,
    MenuService,
    ProductService,
    RoleService,
    UserService,
)
from showroom.uploads import StoredImage, image_extension

# Cheapest Argon2 parameters argon2-cffi accepts
FAST_HASH = {"time_cost": 1, "memory_cost": 8, "parallelism": 1}


# ============================================================================
# Fakes
# ============================================================================


class FakeImageStore:
    """Records uploads in memory; ``fail`` makes the next upload raise."""

    def __init__(self):
        self.uploads: List[bytes] = []
        self.fail = False

    async def upload(self, data: bytes, content_type: str) -> StoredImage:
        ext = image_extension(content_type)
        if self.fail:
            raise UploadFault("bucket unavailable")
        self.uploads.append(data)
        key = f"products/{len(self.uploads)}.{ext}"
        return StoredImage(url=f"https://images.test/{key}", key=key)


# ============================================================================
# Storage
# ============================================================================


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite:///:memory:")
    await db.connect()
    yield db
    await db.disconnect()


@pytest_asyncio.fixture
async def store(database):
    store = EntityStore(database)
    await store.create_schema()
    return store


# ============================================================================
# Services
# ============================================================================


@pytest.fixture
def hasher():
    return PasswordHasher(**FAST_HASH)


@pytest.fixture
def signer():
    return TokenSigner("test-secret", default_ttl=3600)


@pytest.fixture
def images():
    return FakeImageStore()


@pytest.fixture
def outbox():
    return ConsoleProvider()


@pytest.fixture
def categories(store):
    return CategoryService(store)


@pytest.fixture
def brands(store):
    return BrandService(store)


@pytest.fixture
def products(store, images):
    return ProductService(store, images)


@pytest.fixture
def users(store, hasher):
    return UserService(store, hasher)


@pytest.fixture
def roles(store):
    return RoleService(store)


@pytest.fixture
def auth(store, hasher, signer):
    return AuthService(store, hasher, signer)


@pytest.fixture
def menu(store):
    return MenuService(store)


@pytest.fixture
def contact(outbox):
    return ContactService(outbox, sender="noreply@showroom.test", recipient="shop@showroom.test")


@pytest_asyncio.fixture
async def seeded_roles(roles):
    """``admin`` (id 1) and ``staff`` (id 2)."""
    for role_id, name in ((1, "admin"), (2, "staff")):
        result = await roles.create_role(role_id, name, ["/user", "/product"])
        assert result.ok
    return roles


async def make_catalog(categories, brands, *, category="TV", brand="Sony"):
    """Create one category and one brand, returning their ids."""
    c = await categories.create(category_name_en=category)
    b = await brands.create(brand_name_en=brand)
    assert c.ok and b.ok
    return c.get("id"), b.get("id")


def product_fields(category_id, brand_id, **overrides):
    fields = {
        "model_no": "KD-55X",
        "price": 999.0,
        "discount_price": 899.0,
        "prod_desc_en": "55 inch LED",
        "prod_name_en": "Bravia 55",
        "category_id": category_id,
        "brand_id": brand_id,
    }
    fields.update(overrides)
    return fields


# ============================================================================
# HTTP
# ============================================================================


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite:///:memory:",
        token_secret="test-secret",
        hash_time_cost=FAST_HASH["time_cost"],
        hash_memory_cost=FAST_HASH["memory_cost"],
        hash_parallelism=FAST_HASH["parallelism"],
    )


@pytest_asyncio.fixture
async def app(settings, database, images, outbox):
    # ASGITransport does not send lifespan events; start the app directly
    app = create_app(settings, database=database, image_store=images, mail_provider=outbox)
    await app.startup()
    yield app
    await app.shutdown()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
