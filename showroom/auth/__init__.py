"""
Showroom auth - password hashing and session tokens.
"""

from .hashing import PasswordHasher
from .tokens import DEFAULT_TTL, TokenSigner

__all__ = ["PasswordHasher", "TokenSigner", "DEFAULT_TTL"]
