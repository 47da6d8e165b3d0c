"""User domain definitions."""

from enum import Enum


class UserRole(str, Enum):
    """User roles in the system."""

    READER = "READER"
    WRITER = "WRITER"
    ADMIN = "ADMIN"

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.WRITER, UserRole.ADMIN)
