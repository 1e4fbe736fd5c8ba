"""Base repository class with generic CRUD, query and paging operations.

This module implements a composition-based repository pattern that provides
reusable database access for any SQLAlchemy model with an integer ``id``.

Key Concepts:
- EXPLICIT SESSION: each repository is constructed with the AsyncSession it
  works in; there is no ambient database handle
- GENERIC TYPE SAFETY: BaseRepository[ModelType] is instantiated once per entity
- IMMEDIATE COMMIT: every mutation commits before it returns
- INCLUDES: related entities are eagerly loaded through the model's own
  ``Include`` enum, resolved here to ``selectinload`` options
- TRACKING: reads return detached snapshots unless ``tracking=True``
- PAGING: offset/limit pages with total count via PagedList
- TRACING: @trace_database decorators integrate with OpenTelemetry

Usage Example:
    from sqlalchemy.ext.asyncio import AsyncSession
    from codity.models import Follow

    session: AsyncSession
    follows = BaseRepository(session, Follow)
    edge = await follows.get_by(Follow.follower_id == 1, Follow.following_id == 2)
    page = await follows.get_paged_by(
        Follow.following_id == 2,
        page_number=1,
        page_size=10,
        order_by=Follow.id,
        includes=[Follow.Include.FOLLOWER],
    )
    await follows.add(Follow(follower_id=1, following_id=3))

See codity/repositories/user.py for an example of composition pattern usage.
"""

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any, Generic, NoReturn, TypeVar

from sqlalchemy import ColumnElement, Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from codity.core.logging import get_logger
from codity.core.tracing import trace_database
from codity.repositories.paging import PagedList

# ============================================================================
# GENERIC TYPE DEFINITION
# ============================================================================
# ModelType is bound to DeclarativeBase so BaseRepository[ModelType] works with
# any mapped class. Models are expected to expose an integer ``id`` column and
# may declare a nested ``Include`` enum naming their expandable relationships.
ModelType = TypeVar("ModelType", bound=DeclarativeBase)

logger = get_logger(__name__)


# ============================================================================
# CUSTOM EXCEPTION HIERARCHY
# ============================================================================
# Storage failures are never swallowed here: they are re-raised as
# RepositoryError (chained to the SQLAlchemy error) for outer layers to handle.


class RepositoryError(Exception):
    """Base exception for all repository operations.

    Raised when the storage layer fails. The original SQLAlchemy exception is
    available as ``__cause__``.
    """
    pass


class ConflictError(RepositoryError):
    """Raised when a write violates a uniqueness constraint.

    Example:
        try:
            await follows.add(Follow(follower_id=1, following_id=2))
        except ConflictError:
            ...  # the (follower, following) pair already exists
    """
    pass


def _is_conflict(error: SQLAlchemyError) -> bool:
    message = str(error).lower()
    return isinstance(error, IntegrityError) and ("unique" in message or "duplicate" in message)


# ============================================================================
# BASE REPOSITORY - MAIN CRUD IMPLEMENTATION
# ============================================================================


class BaseRepository(Generic[ModelType]):
    """Generic repository providing CRUD, query and paging for one model.

    Entity repositories inject BaseRepository as a dependency (composition)
    rather than inheriting from it. Services that need nothing beyond the
    generic operations use a BaseRepository[Model] directly.

    Args:
        session: AsyncSession for database communication
        model: SQLAlchemy model class (e.g., User, Follow)

    Type Safety:
        repo: BaseRepository[Follow] = BaseRepository(session, Follow)
        edge: Follow | None = await repo.get(edge_id)
    """

    def __init__(self, session: AsyncSession, model: type[ModelType]) -> None:
        self._session = session
        self._model = model
        self._logger = get_logger(f"{__name__}.{model.__name__}Repository")

    # ========================================================================
    # WRITE OPERATIONS
    # ========================================================================
    # Each write commits immediately. On failure the session is rolled back so
    # it stays usable, and the error is re-raised.

    @trace_database()
    async def add(self, entity: ModelType) -> ModelType:
        """Insert an entity, commit, and reload server-generated columns.

        Raises:
            ConflictError: If the insert violates a unique constraint
            RepositoryError: For other database errors
        """
        self._logger.debug("Adding entity", model=self._model.__name__)

        self._session.add(entity)
        await self._commit("add")
        await self._session.refresh(entity)

        self._logger.info(
            "Entity added",
            model=self._model.__name__,
            entity_id=getattr(entity, "id", None),
        )
        return entity

    @trace_database()
    async def add_range(self, entities: Iterable[ModelType]) -> list[ModelType]:
        """Insert several entities in a single commit."""
        entities = list(entities)
        self._logger.debug("Adding entities", model=self._model.__name__, count=len(entities))

        self._session.add_all(entities)
        await self._commit("add_range")
        for entity in entities:
            await self._session.refresh(entity)

        self._logger.info("Entities added", model=self._model.__name__, count=len(entities))
        return entities

    @trace_database()
    async def update(self, entity: ModelType) -> ModelType:
        """Persist the current state of an entity.

        Detached snapshots are merged back into the session first, so the
        returned instance may differ from the one passed in.

        Raises:
            ConflictError: If the update violates a unique constraint
            RepositoryError: For other database errors
        """
        entity = await self._attach(entity)
        await self._commit("update")
        await self._session.refresh(entity)

        self._logger.info(
            "Entity updated",
            model=self._model.__name__,
            entity_id=getattr(entity, "id", None),
        )
        return entity

    @trace_database()
    async def update_range(self, entities: Iterable[ModelType]) -> list[ModelType]:
        """Persist several entities in a single commit."""
        attached = [await self._attach(entity) for entity in entities]
        await self._commit("update_range")
        for entity in attached:
            await self._session.refresh(entity)

        self._logger.info("Entities updated", model=self._model.__name__, count=len(attached))
        return attached

    @trace_database()
    async def remove(self, entity: ModelType) -> None:
        """Delete an entity and commit."""
        entity = await self._attach(entity)
        await self._session.delete(entity)
        await self._commit("remove")

        self._logger.info(
            "Entity removed",
            model=self._model.__name__,
            entity_id=getattr(entity, "id", None),
        )

    @trace_database()
    async def remove_range(self, entities: Iterable[ModelType]) -> None:
        """Delete several entities in a single commit."""
        count = 0
        for entity in entities:
            await self._session.delete(await self._attach(entity))
            count += 1
        await self._commit("remove_range")

        self._logger.info("Entities removed", model=self._model.__name__, count=count)

    # ========================================================================
    # READ OPERATIONS
    # ========================================================================

    @trace_database()
    async def get(
        self,
        entity_id: int,
        *,
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> ModelType | None:
        """Get an entity by primary key, or None if it does not exist.

        Args:
            entity_id: Primary key value
            tracking: Keep the entity attached so changes can be saved back
            includes: Members of the model's ``Include`` enum to eager-load

        Raises:
            ValueError: If an include does not belong to this model
            RepositoryError: For database errors
        """
        query = self._query(getattr(self._model, "id") == entity_id, includes=includes)
        try:
            entity = (await self._session.execute(query)).scalar_one_or_none()
        except SQLAlchemyError as e:
            self._fail("get", e, entity_id=entity_id)

        self._logger.debug(
            "Entity found" if entity is not None else "Entity not found",
            model=self._model.__name__,
            entity_id=entity_id,
        )
        return self._finish_one(entity, tracking)

    @trace_database()
    async def get_by(
        self,
        *criteria: ColumnElement[bool],
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> ModelType | None:
        """Get the first entity matching all criteria, or None.

        Example:
            edge = await follows.get_by(
                Follow.follower_id == user_id,
                Follow.following_id == target_id,
            )
        """
        query = self._query(*criteria, includes=includes).limit(1)
        try:
            entity = (await self._session.execute(query)).scalars().first()
        except SQLAlchemyError as e:
            self._fail("get_by", e)

        return self._finish_one(entity, tracking)

    @trace_database()
    async def exist(
        self,
        *criteria: ColumnElement[bool],
        includes: Sequence[Enum] = (),
    ) -> bool:
        """Return whether any entity matches all criteria.

        Includes are validated but do not change an EXISTS check; criteria
        that span relationships should use ``has()``/``any()``.
        """
        self._loader_options(includes)
        query = select(select(getattr(self._model, "id")).where(*criteria).exists())
        try:
            return bool((await self._session.execute(query)).scalar())
        except SQLAlchemyError as e:
            self._fail("exist", e)

    @trace_database()
    async def get_all(
        self,
        *,
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> list[ModelType]:
        """Get every entity of this model. No pagination."""
        return await self._fetch_all(self._query(includes=includes), tracking, "get_all")

    @trace_database()
    async def get_all_by(
        self,
        *criteria: ColumnElement[bool],
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> list[ModelType]:
        """Get every entity matching all criteria. No pagination."""
        return await self._fetch_all(
            self._query(*criteria, includes=includes), tracking, "get_all_by"
        )

    @trace_database()
    async def get_paged(
        self,
        page_number: int,
        page_size: int,
        *,
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> PagedList[ModelType]:
        """Get one page of all entities, ordered by primary key."""
        query = self._query(includes=includes).order_by(getattr(self._model, "id"))
        return await self._page(query, page_number, page_size, tracking)

    @trace_database()
    async def get_paged_by(
        self,
        *criteria: ColumnElement[bool],
        page_number: int,
        page_size: int,
        order_by: Any = None,
        descending: bool = True,
        tracking: bool = False,
        includes: Sequence[Enum] = (),
    ) -> PagedList[ModelType]:
        """Get one page of the entities matching all criteria.

        Args:
            *criteria: SQL expressions combined with AND
            page_number: 1-based page number
            page_size: Items per page (must be positive)
            order_by: Column, or tuple of columns, to order by; unordered if None
            descending: Order direction when order_by is given
            tracking: Keep returned entities attached to the session
            includes: Members of the model's ``Include`` enum to eager-load

        Raises:
            ValueError: If paging arguments or includes are invalid
            RepositoryError: For database errors
        """
        query = self._query(*criteria, includes=includes)
        if order_by is not None:
            columns = order_by if isinstance(order_by, (list, tuple)) else (order_by,)
            query = query.order_by(
                *(column.desc() if descending else column.asc() for column in columns)
            )
        return await self._page(query, page_number, page_size, tracking)

    # ========================================================================
    # INTERNAL HELPERS
    # ========================================================================

    def _query(self, *criteria: ColumnElement[bool], includes: Sequence[Enum] = ()) -> Select[Any]:
        query = select(self._model)
        if criteria:
            query = query.where(*criteria)
        options = self._loader_options(includes)
        if options:
            query = query.options(*options)
        return query

    def _loader_options(self, includes: Sequence[Enum]) -> list[LoaderOption]:
        """Resolve include keys to eager-load options for this model."""
        allowed = getattr(self._model, "Include", None)
        options: list[LoaderOption] = []
        for include in includes:
            if allowed is None or not isinstance(include, allowed):
                raise ValueError(
                    f"{include!r} is not a valid include for {self._model.__name__}"
                )
            options.append(selectinload(getattr(self._model, include.value)))
        return options

    async def _fetch_all(self, query: Select[Any], tracking: bool, action: str) -> list[ModelType]:
        try:
            entities = list((await self._session.execute(query)).scalars().all())
        except SQLAlchemyError as e:
            self._fail(action, e)

        self._logger.debug(
            "Fetched entities", model=self._model.__name__, action=action, count=len(entities)
        )
        return self._finish_many(entities, tracking)

    async def _page(
        self, query: Select[Any], page_number: int, page_size: int, tracking: bool
    ) -> PagedList[ModelType]:
        try:
            paged = await PagedList.create(self._session, query, page_number, page_size)
        except SQLAlchemyError as e:
            self._fail("page", e, page_number=page_number, page_size=page_size)

        self._logger.debug(
            "Fetched page",
            model=self._model.__name__,
            page_number=page_number,
            page_size=page_size,
            count=len(paged),
            total=paged.total_count,
        )
        self._finish_many(paged.items, tracking)
        return paged

    def _finish_one(self, entity: ModelType | None, tracking: bool) -> ModelType | None:
        if entity is not None and not tracking:
            self._session.expunge(entity)
        return entity

    def _finish_many(self, entities: list[ModelType], tracking: bool) -> list[ModelType]:
        if not tracking:
            for entity in entities:
                self._session.expunge(entity)
        return entities

    async def _attach(self, entity: ModelType) -> ModelType:
        if entity in self._session:
            return entity
        return await self._session.merge(entity)

    async def _commit(self, action: str) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._fail(action, e)

    def _fail(self, action: str, error: SQLAlchemyError, **context: Any) -> NoReturn:
        self._logger.error(
            f"Failed to {action.replace('_', ' ')}",
            model=self._model.__name__,
            error=str(error),
            **context,
        )
        if _is_conflict(error):
            raise ConflictError(f"{self._model.__name__} conflicts with existing data: {error}") from error
        raise RepositoryError(f"Failed to {action} {self._model.__name__}: {error}") from error
