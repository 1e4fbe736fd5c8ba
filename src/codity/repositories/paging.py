"""Offset/limit paging over SQLAlchemy select statements."""

import math
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class PagedList(Generic[T]):
    """One page of an ordered, filtered result set plus total-count metadata.

    Iterating a PagedList yields the items of the current page only. An
    empty page is falsy, which is how services detect "nothing on this page".

    Attributes:
        items: Entities on this page
        total_count: Number of rows matching the unsliced query
        page_size: Requested page size
        current_page: 1-based page number
        total_pages: ceil(total_count / page_size)
        has_next: Whether a later page exists
        has_previous: Whether an earlier page exists

    Example:
        paged = await PagedList.create(session, select(User).order_by(User.id), 2, 10)
        for user in paged:
            print(user.username)
        print(paged.total_count, paged.total_pages)
    """

    def __init__(
        self,
        items: list[T],
        total_count: int,
        page_number: int,
        page_size: int,
    ) -> None:
        _validate(page_number, page_size)
        self.items = items
        self.total_count = total_count
        self.page_size = page_size
        self.current_page = page_number
        self.total_pages = math.ceil(total_count / page_size)
        self.has_next = page_number < self.total_pages
        self.has_previous = page_number > 1

    @classmethod
    async def create(
        cls,
        session: AsyncSession,
        query: Select[Any],
        page_number: int,
        page_size: int,
    ) -> "PagedList[Any]":
        """Count the query, then fetch the requested page.

        Issues exactly two statements: a COUNT over the unsliced query (with
        any ordering stripped) and the OFFSET/LIMIT fetch. The full result set
        is never materialized.

        Raises:
            ValueError: If page_number < 1 or page_size < 1
        """
        _validate(page_number, page_size)

        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total_count = (await session.execute(count_query)).scalar() or 0

        page_query = query.offset((page_number - 1) * page_size).limit(page_size)
        items = list((await session.execute(page_query)).scalars().all())

        return cls(items, total_count, page_number, page_size)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return (
            f"PagedList(page={self.current_page}/{self.total_pages}, "
            f"size={self.page_size}, items={len(self.items)}, total={self.total_count})"
        )


def _validate(page_number: int, page_size: int) -> None:
    if page_number < 1:
        raise ValueError("Page number must be at least 1")
    if page_size < 1:
        raise ValueError("Page size must be at least 1")
