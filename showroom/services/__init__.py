"""
Showroom services.

Every public operation returns a ``ServiceResult``; none raises.
"""

from .auth import INVALID_CREDENTIALS, AuthService
from .base import SoftDeleteService, operation
from .catalog import BrandService, CategoryService
from .contact import ContactService
from .menu import NO_DATA, MenuService
from .products import ProductService
from .references import ReferenceResolver
from .users import DEFAULT_ROLE_NAMES, RoleService, UserService

__all__ = [
    "INVALID_CREDENTIALS",
    "AuthService",
    "SoftDeleteService",
    "operation",
    "BrandService",
    "CategoryService",
    "ContactService",
    "NO_DATA",
    "MenuService",
    "ProductService",
    "ReferenceResolver",
    "DEFAULT_ROLE_NAMES",
    "RoleService",
    "UserService",
]
