"""
Showroom - back-office catalog API.

Users and roles, category / brand / product management with soft delete,
and the category -> brand menu aggregation, served over a small ASGI app.
"""

__version__ = "0.1.0"

from .app import create_app
from .config import ConfigError, ConfigLoader, Settings

__all__ = [
    "__version__",
    "create_app",
    "ConfigError",
    "ConfigLoader",
    "Settings",
]
