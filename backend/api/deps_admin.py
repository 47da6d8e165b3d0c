"""
Role-gated authentication dependencies.
"""

from typing import Annotated

from fastapi import Depends

from api.dependencies import get_current_user
from core.domain.user import UserRole
from core.errors import Unauthorized
from infrastructure.database.models.user import User


async def get_current_admin_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """
    Dependency to verify current user is an admin.

    Raises:
        Unauthorized: If the session belongs to any other role
    """
    if current_user.role != UserRole.ADMIN.value:
        raise Unauthorized("Admin access required")
    return current_user


async def get_current_writer_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency to verify current user is a writer."""
    if current_user.role != UserRole.WRITER.value:
        raise Unauthorized("Writer access required")
    return current_user
