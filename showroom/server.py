"""
Development server - logging setup and uvicorn runner.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import uvicorn

from .app import create_app
from .config import ConfigLoader, Settings
from .http import ShowroomApp

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger("showroom.server")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


def app_factory() -> ShowroomApp:
    """Build the application from ``.env`` and the environment (uvicorn ``--factory``)."""
    env_file = os.environ.get("SHOWROOM_ENV_FILE", ".env")
    settings = ConfigLoader.load(env_file=env_file if os.path.exists(env_file) else None)
    configure_logging(settings.log_level)
    return create_app(settings)


def run(settings: Optional[Settings] = None, reload: bool = False) -> None:
    """
    Run the server.

    Database connection and schema creation happen in the application's
    lifespan startup. With ``reload`` the application is rebuilt by
    ``app_factory`` in the reloader's worker, so settings come from the
    environment rather than from ``settings``.
    """
    settings = settings or ConfigLoader.load()
    configure_logging(settings.log_level)
    logger.info(f"Starting uvicorn server on {settings.host}:{settings.port}")

    if reload:
        uvicorn.run(
            "showroom.server:app_factory",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
    else:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )
