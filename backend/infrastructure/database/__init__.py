"""Database access: the per-app ``Database`` holder, request sessions and models."""

from .connection import Database, close_db, get_db, init_db
from .models.base import Base

__all__ = ["Base", "Database", "get_db", "init_db", "close_db"]
