"""Repository layer for database operations.

Repositories encapsulate data access behind a small generic API and are
always constructed with the session they operate in.
"""

from codity.repositories.base import (
    BaseRepository,
    ConflictError,
    RepositoryError,
)
from codity.repositories.paging import PagedList
from codity.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ConflictError",
    "PagedList",
    "RepositoryError",
    "UserRepository",
]
