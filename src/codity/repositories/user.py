from collections.abc import Sequence

from sqlalchemy import ColumnElement, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from codity.core.logging import get_logger
from codity.models.user import User
from codity.repositories.base import BaseRepository
from codity.repositories.paging import PagedList


class UserRepository:
    """Repository for User entities using composition pattern.

    Standard operations are delegated to BaseRepository[User]; user search
    is implemented here.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        # COMPOSITION: Inject BaseRepository as dependency, not inheritance
        self._base_repo = BaseRepository(session, User)
        self._logger = get_logger(f"{__name__}.UserRepository")

    # ========================================================================
    # DELEGATED METHODS
    # ========================================================================

    async def add(self, user: User) -> User:
        """Insert a user and commit.

        Raises:
            ConflictError: If the username or e-mail is already taken
        """
        return await self._base_repo.add(user)

    async def get(
        self,
        user_id: int,
        *,
        tracking: bool = False,
        includes: Sequence[User.Include] = (),
    ) -> User | None:
        """Get a user by ID, or None if not found."""
        return await self._base_repo.get(user_id, tracking=tracking, includes=includes)

    async def get_by(
        self,
        *criteria: ColumnElement[bool],
        tracking: bool = False,
        includes: Sequence[User.Include] = (),
    ) -> User | None:
        """Get the first user matching all criteria, or None."""
        return await self._base_repo.get_by(*criteria, tracking=tracking, includes=includes)

    async def exist(self, *criteria: ColumnElement[bool]) -> bool:
        """Return whether any user matches all criteria."""
        return await self._base_repo.exist(*criteria)

    async def get_all_by(
        self,
        *criteria: ColumnElement[bool],
        tracking: bool = False,
        includes: Sequence[User.Include] = (),
    ) -> list[User]:
        """Get every user matching all criteria."""
        return await self._base_repo.get_all_by(*criteria, tracking=tracking, includes=includes)

    async def update(self, user: User) -> User:
        """Persist the current state of a user and commit."""
        return await self._base_repo.update(user)

    async def remove(self, user: User) -> None:
        """Delete a user and commit."""
        await self._base_repo.remove(user)

    # ========================================================================
    # CUSTOM USER METHODS
    # ========================================================================

    async def search(
        self,
        query: str,
        page_number: int,
        page_size: int,
        current_user_id: int,
    ) -> PagedList[User]:
        """Search users by name or username, excluding the searching user.

        Matching is a case-insensitive substring test against username, first
        name, last name and "first last". "%" and "_" in the query match
        literally. A blank query matches everyone.
        Results are ordered by first name, last name, then ID.

        Args:
            query: Text to look for
            page_number: 1-based page number
            page_size: Items per page
            current_user_id: The user performing the search; never returned

        Returns:
            PagedList of matching users (detached snapshots)

        Raises:
            ValueError: If paging arguments are invalid
            RepositoryError: For database errors
        """
        self._logger.debug(
            "Searching users",
            query=query,
            page_number=page_number,
            page_size=page_size,
        )

        criteria: list[ColumnElement[bool]] = [User.id != current_user_id]
        term = query.strip().lower()
        if term:
            full_name = func.lower(User.first_name + " " + User.last_name)
            criteria.append(
                or_(
                    func.lower(User.username).contains(term, autoescape=True),
                    func.lower(User.first_name).contains(term, autoescape=True),
                    func.lower(User.last_name).contains(term, autoescape=True),
                    full_name.contains(term, autoescape=True),
                )
            )

        paged = await self._base_repo.get_paged_by(
            *criteria,
            page_number=page_number,
            page_size=page_size,
            order_by=(User.first_name, User.last_name, User.id),
            descending=False,
        )

        self._logger.debug("User search finished", count=len(paged), total=paged.total_count)
        return paged
