"""
Application factory - wires settings, storage, services and controllers
into one ASGI application.
"""

from __future__ import annotations

import logging
from typing import Optional

from .auth import PasswordHasher, TokenSigner
from .config import Settings
from .controllers import (
    AuthController,
    BrandController,
    CategoryController,
    ContactController,
    MenuController,
    ProductController,
    RoleController,
    UserController,
)
from .db import Database
from .http import Router, ShowroomApp, StaticFiles
from .mail import ConsoleProvider, MailProvider, SMTPProvider
from .models import EntityStore
from .services import (
    AuthService,
    BrandService,
    CategoryService,
    ContactService,
    MenuService,
    ProductService,
    RoleService,
    UserService,
)
from .uploads import ImageStore, LocalImageStore

logger = logging.getLogger("showroom.app")


def build_mail_provider(settings: Settings) -> MailProvider:
    if settings.mail_provider == "smtp":
        return SMTPProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleProvider()


def build_hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(
        time_cost=settings.hash_time_cost,
        memory_cost=settings.hash_memory_cost,
        parallelism=settings.hash_parallelism,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    image_store: Optional[ImageStore] = None,
    mail_provider: Optional[MailProvider] = None,
) -> ShowroomApp:
    """
    Build the application.

    ``database``, ``image_store`` and ``mail_provider`` replace the ones
    derived from ``settings``. The database is connected and the schema
    created on lifespan startup (or ``await app.startup()``).
    """
    settings = settings or Settings()
    database = database or Database(settings.database_url)
    images = image_store or LocalImageStore(settings.media_root, settings.media_url)
    provider = mail_provider or build_mail_provider(settings)

    store = EntityStore(database)
    hasher = build_hasher(settings)
    signer = TokenSigner(settings.token_secret, settings.token_ttl)

    users = UserService(store, hasher)
    services = {
        "auth": AuthService(store, hasher, signer),
        "users": users,
        "roles": RoleService(store),
        "categories": CategoryService(store),
        "brands": BrandService(store),
        "products": ProductService(store, images),
        "menu": MenuService(store),
        "contact": ContactService(provider, settings.mail_from, settings.mail_to),
    }

    router = Router()
    for controller in (
        AuthController(
            services["auth"],
            cookie_secure=settings.cookie_secure,
            token_ttl=settings.token_ttl,
        ),
        UserController(users),
        RoleController(services["roles"]),
        CategoryController(services["categories"]),
        BrandController(services["brands"]),
        ProductController(services["products"]),
        MenuController(services["menu"]),
        ContactController(services["contact"]),
    ):
        router.include(controller)

    static = None
    if isinstance(images, LocalImageStore):
        static = StaticFiles(settings.media_url, settings.media_root)

    app = ShowroomApp(router, static=static)
    app.state.update(settings=settings, database=database, store=store, **services)

    async def open_database() -> None:
        await database.connect()
        await store.create_schema()

    async def close_database() -> None:
        await database.disconnect()

    app.on_startup.append(open_database)
    app.on_shutdown.append(close_database)

    logger.debug(f"Application created with {sum(len(m) for m in router.routes.values())} routes")
    return app
