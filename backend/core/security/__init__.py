"""Password hashing and session tokens."""

from .password import PasswordHasher
from .tokens import SessionIdentity, TokenService

__all__ = ["PasswordHasher", "SessionIdentity", "TokenService"]
