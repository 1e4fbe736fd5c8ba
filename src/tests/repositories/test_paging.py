"""Test PagedList paging over real queries."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codity.models import Post
from codity.repositories.paging import PagedList
from tests.factories import commit_and_clear, create_post, create_user


class TestPagedListMetadata:
    """Test page metadata computed by the constructor."""

    def test_middle_page(self) -> None:
        paged = PagedList(items=list(range(10)), total_count=25, page_number=2, page_size=10)

        assert paged.total_pages == 3
        assert paged.current_page == 2
        assert paged.has_next is True
        assert paged.has_previous is True

    def test_last_page(self) -> None:
        paged = PagedList(items=list(range(5)), total_count=25, page_number=3, page_size=10)

        assert paged.has_next is False
        assert paged.has_previous is True
        assert len(paged) == 5

    def test_empty(self) -> None:
        paged = PagedList(items=[], total_count=0, page_number=1, page_size=10)

        assert paged.total_pages == 0
        assert not paged
        assert paged.has_next is False
        assert paged.has_previous is False

    def test_zero_page_number(self) -> None:
        with pytest.raises(ValueError, match="Page number must be at least 1"):
            PagedList(items=[], total_count=0, page_number=0, page_size=10)

    def test_zero_page_size(self) -> None:
        with pytest.raises(ValueError, match="Page size must be at least 1"):
            PagedList(items=[], total_count=0, page_number=1, page_size=0)


class TestPagedListCreate:
    """Test PagedList.create against SQLite."""

    @pytest.fixture
    async def posts(self, db_session: AsyncSession) -> list[Post]:
        """Seed 25 posts whose text is their 1-based position."""
        user = await create_user(db_session=db_session)
        posts = [
            await create_post(db_session=db_session, user=user, text=f"item {i}")
            for i in range(1, 26)
        ]
        await commit_and_clear(db_session)
        return posts

    async def test_second_page(self, db_session: AsyncSession, posts: list[Post]) -> None:
        """Page 2 of size 10 over 25 ordered items returns items 11-20."""
        query = select(Post).order_by(Post.id)

        paged = await PagedList.create(db_session, query, page_number=2, page_size=10)

        assert [post.text for post in paged] == [f"item {i}" for i in range(11, 21)]
        assert paged.total_count == 25
        assert paged.total_pages == 3
        assert paged.current_page == 2
        assert paged.page_size == 10

    async def test_partial_last_page(self, db_session: AsyncSession, posts: list[Post]) -> None:
        query = select(Post).order_by(Post.id)

        paged = await PagedList.create(db_session, query, page_number=3, page_size=10)

        assert [post.text for post in paged] == [f"item {i}" for i in range(21, 26)]
        assert paged.has_next is False

    async def test_page_past_end(self, db_session: AsyncSession, posts: list[Post]) -> None:
        """A page beyond the last one is empty but keeps the total count."""
        query = select(Post).order_by(Post.id)

        paged = await PagedList.create(db_session, query, page_number=4, page_size=10)

        assert len(paged) == 0
        assert paged.total_count == 25

    async def test_filtered_count(self, db_session: AsyncSession, posts: list[Post]) -> None:
        """The count honours the query's filter."""
        query = select(Post).where(Post.text.like("item 1%")).order_by(Post.id)

        paged = await PagedList.create(db_session, query, page_number=1, page_size=5)

        # item 1 and item 10-19
        assert paged.total_count == 11
        assert paged.total_pages == 3
        assert len(paged) == 5

    async def test_empty_query(self, db_session: AsyncSession) -> None:
        query = select(Post).order_by(Post.id)

        paged = await PagedList.create(db_session, query, page_number=1, page_size=10)

        assert list(paged) == []
        assert paged.total_count == 0
        assert paged.total_pages == 0

    async def test_invalid_page_size(self, db_session: AsyncSession) -> None:
        with pytest.raises(ValueError, match="Page size must be at least 1"):
            await PagedList.create(db_session, select(Post), page_number=1, page_size=0)

    async def test_two_statements_without_loading_everything(
        self, db_session: AsyncSession, posts: list[Post], sql_statements: list[str]
    ) -> None:
        """Only a COUNT and the LIMIT/OFFSET fetch reach the database."""
        query = select(Post).order_by(Post.id)
        sql_statements.clear()

        paged = await PagedList.create(db_session, query, page_number=2, page_size=10)

        assert len(paged) == 10
        assert len(sql_statements) == 2
        count_sql, page_sql = sql_statements
        assert "count(" in count_sql.lower()
        assert "LIMIT" in page_sql.upper()
        assert "OFFSET" in page_sql.upper()
