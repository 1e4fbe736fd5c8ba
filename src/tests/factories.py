"""Model factory functions for testing.

Provides simple factory functions to create model instances with reasonable defaults.
Each factory accepts optional kwargs to override defaults and an optional db_session
to persist (flush) the instance to the database.

Example:
    # Create unsaved instance
    user = await create_user(first_name="Ada")

    # Create and save to database
    alice = await create_user(db_session=session, username="alice")
    bob = await create_user(db_session=session, username="bob")
    await create_follow(db_session=session, follower=alice, following=bob)
    await session.commit()
"""

import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from codity.models.follow import Follow
from codity.models.post import Post
from codity.models.post_like import PostLike
from codity.models.user import User

BASE_DATE = datetime(2024, 1, 1, 12, 0, 0)


async def create_user(
    db_session: AsyncSession | None = None,
    **kwargs: Any,
) -> User:
    """Create a User instance for testing.

    Args:
        db_session: Optional database session to persist the instance
        **kwargs: Override default user attributes

    Returns:
        User: User model instance
    """
    username = kwargs.get("username", f"user-{uuid.uuid4().hex[:8]}")

    defaults = {
        "username": username,
        "email": kwargs.get("email", f"{username}@example.com"),
        "first_name": kwargs.get("first_name", "Test"),
        "last_name": kwargs.get("last_name", "User"),
        "image": kwargs.get("image", None),
        "about": kwargs.get("about", None),
    }

    user = User(**defaults)

    if db_session:
        db_session.add(user)
        await db_session.flush()

    return user


async def create_post(
    db_session: AsyncSession | None = None,
    user: User | None = None,
    **kwargs: Any,
) -> Post:
    """Create a Post instance for testing.

    Args:
        db_session: Optional database session to persist the instance
        user: Optional author (created if not provided and a session is given)
        **kwargs: Override default post attributes

    Returns:
        Post: Post model instance
    """
    if not user and db_session:
        user = await create_user(db_session=db_session)

    defaults = {
        "user_id": user.id if user else kwargs.get("user_id"),
        "text": kwargs.get("text", "Hello, world"),
        "creation_date": kwargs.get("creation_date", BASE_DATE),
    }

    post = Post(**defaults)

    if db_session:
        db_session.add(post)
        await db_session.flush()

    return post


async def create_follow(
    db_session: AsyncSession | None = None,
    follower: User | None = None,
    following: User | None = None,
) -> Follow:
    """Create a Follow edge ``follower -> following`` for testing."""
    if not follower and db_session:
        follower = await create_user(db_session=db_session)
    if not following and db_session:
        following = await create_user(db_session=db_session)

    follow = Follow(
        follower_id=follower.id if follower else None,
        following_id=following.id if following else None,
    )

    if db_session:
        db_session.add(follow)
        await db_session.flush()

    return follow


async def create_post_like(
    db_session: AsyncSession | None = None,
    user: User | None = None,
    post: Post | None = None,
) -> PostLike:
    """Create a PostLike for testing."""
    if not user and db_session:
        user = await create_user(db_session=db_session)
    if not post and db_session:
        post = await create_post(db_session=db_session)

    like = PostLike(
        user_id=user.id if user else None,
        post_id=post.id if post else None,
    )

    if db_session:
        db_session.add(like)
        await db_session.flush()

    return like


# Convenience function to build a small graph for list tests
async def create_posts(
    db_session: AsyncSession,
    user: User,
    count: int,
) -> list[Post]:
    """Create ``count`` posts for ``user``, one hour apart, oldest first.

    Example:
        posts = await create_posts(session, user, 7)
        assert posts[-1].creation_date > posts[0].creation_date
    """
    return [
        await create_post(
            db_session=db_session,
            user=user,
            text=f"post {i}",
            creation_date=BASE_DATE + timedelta(hours=i),
        )
        for i in range(count)
    ]


async def commit_and_clear(db_session: AsyncSession) -> None:
    """Commit seeded rows and empty the identity map.

    Later reads then load fresh rows instead of the instances the factories
    created.
    """
    await db_session.commit()
    db_session.expunge_all()
