"""
Request handlers, one controller per resource.
"""

from .auth import COOKIE_NAME, AuthController
from .catalog import BrandController, CategoryController
from .menu import ContactController, MenuController
from .products import ProductController
from .users import RoleController, UserController

__all__ = [
    "COOKIE_NAME",
    "AuthController",
    "BrandController",
    "CategoryController",
    "ContactController",
    "MenuController",
    "ProductController",
    "RoleController",
    "UserController",
]
