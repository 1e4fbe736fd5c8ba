"""Database seed script with sample social data.

This script populates the database with sample users, posts, likes and
follow relationships for local development.

Usage:
    python seed.py

Features:
    - Idempotent: Safe to run multiple times
    - Creates missing tables first (no migrations are involved)
    - Follows go through UserService, so notifications are generated as in
      the running API
"""

import asyncio
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from codity.core.database import async_session_maker, close_database, init_models
from codity.core.logging import configure_logging, get_logger
from codity.models import Post, PostLike, User
from codity.repositories import BaseRepository, UserRepository
from codity.schemas import FollowingRequest
from codity.services import UserService

configure_logging()
logger = get_logger(__name__)

# Sample data
USERS = [
    {
        "username": "ada",
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "about": "First programmer. Fond of analytical engines.",
    },
    {
        "username": "alan",
        "email": "alan@example.com",
        "first_name": "Alan",
        "last_name": "Turing",
        "about": "Thinking about thinking machines.",
    },
    {
        "username": "grace",
        "email": "grace@example.com",
        "first_name": "Grace",
        "last_name": "Hopper",
        "about": "It's easier to ask forgiveness than it is to get permission.",
    },
    {
        "username": "edsger",
        "email": "edsger@example.com",
        "first_name": "Edsger",
        "last_name": "Dijkstra",
        "about": None,
    },
    {
        "username": "barbara",
        "email": "barbara@example.com",
        "first_name": "Barbara",
        "last_name": "Liskov",
        "about": "Substitutability matters.",
    },
]

POSTS = {
    "ada": [
        "Notes on the analytical engine, part one.",
        "Notes on the analytical engine, part two.",
        "The engine weaves algebraic patterns.",
    ],
    "alan": [
        "Can machines think?",
        "On computable numbers.",
    ],
    "grace": [
        "Found a moth in the relay today.",
        "A ship in port is safe, but that's not what ships are built for.",
        "Compilers will change everything.",
        "Nanoseconds, illustrated with wire.",
        "Cobol draft is ready for review.",
        "Teaching the Navy to program.",
    ],
    "barbara": [
        "Abstract data types are here to stay.",
    ],
}

# (follower, following)
FOLLOWS = [
    ("ada", "alan"),
    ("ada", "grace"),
    ("alan", "ada"),
    ("grace", "ada"),
    ("grace", "barbara"),
    ("edsger", "grace"),
    ("barbara", "edsger"),
]

# (user, author, index of the author's post)
LIKES = [
    ("alan", "ada", 0),
    ("grace", "ada", 2),
    ("ada", "grace", 0),
    ("edsger", "grace", 5),
    ("ada", "barbara", 0),
]


async def seed_users(session: AsyncSession) -> dict[str, User]:
    """Create user records that do not exist yet.

    Returns:
        Dictionary mapping username to User
    """
    logger.info("Seeding users")
    users_repository = UserRepository(session)
    users: dict[str, User] = {}

    for user_data in USERS:
        existing = await users_repository.get_by(User.username == user_data["username"])
        if existing:
            logger.debug("User already exists", username=user_data["username"])
            users[user_data["username"]] = existing
        else:
            users[user_data["username"]] = await users_repository.add(User(**user_data))
            logger.info("Created user", username=user_data["username"])

    return users


async def seed_posts(session: AsyncSession, users: dict[str, User]) -> dict[str, list[Post]]:
    """Create posts for authors that have none.

    Returns:
        Dictionary mapping username to that author's posts, oldest first
    """
    logger.info("Seeding posts")
    posts_repository = BaseRepository(session, Post)
    posts: dict[str, list[Post]] = {}
    now = datetime.now(UTC)

    for username, texts in POSTS.items():
        author = users[username]
        existing = await posts_repository.get_all_by(Post.user_id == author.id)
        if existing:
            logger.debug("Posts already exist", username=username, count=len(existing))
            posts[username] = sorted(existing, key=lambda post: post.creation_date)
            continue

        posts[username] = await posts_repository.add_range(
            Post(
                user_id=author.id,
                text=text,
                creation_date=now - timedelta(days=len(texts) - position),
            )
            for position, text in enumerate(texts)
        )
        logger.info("Created posts", username=username, count=len(texts))

    return posts


async def seed_follows(service: UserService, users: dict[str, User]) -> int:
    """Follow users through the service; existing edges are reported and skipped.

    Returns:
        Number of follow edges created
    """
    logger.info("Seeding follows")
    created = 0

    for follower, following in FOLLOWS:
        response = await service.follow_user(
            users[follower].id, FollowingRequest(following_id=users[following].id)
        )
        if response.success:
            created += 1
            logger.info("Created follow", follower=follower, following=following)
        else:
            logger.debug(
                "Follow skipped",
                follower=follower,
                following=following,
                errors=[error.message for error in response.errors],
            )

    return created


async def seed_likes(
    session: AsyncSession,
    users: dict[str, User],
    posts: dict[str, list[Post]],
) -> int:
    """Create likes that do not exist yet.

    Returns:
        Number of likes created
    """
    logger.info("Seeding likes")
    likes_repository = BaseRepository(session, PostLike)
    created = 0

    for username, author, index in LIKES:
        user_id = users[username].id
        post_id = posts[author][index].id
        if await likes_repository.exist(PostLike.user_id == user_id, PostLike.post_id == post_id):
            logger.debug("Like already exists", username=username, post_id=post_id)
            continue

        await likes_repository.add(PostLike(user_id=user_id, post_id=post_id))
        created += 1

    return created


async def seed_database() -> None:
    """Main seeding function."""
    logger.info("Starting database seeding")
    await init_models()

    async with async_session_maker() as session:
        try:
            users = await seed_users(session)
            posts = await seed_posts(session, users)
            follows = await seed_follows(UserService.from_session(session), users)
            likes = await seed_likes(session, users, posts)
        except Exception as e:
            logger.error("Error seeding database", error=str(e))
            await session.rollback()
            raise

    logger.info(
        "Database seeding completed successfully!",
        users=len(users),
        posts=sum(len(author_posts) for author_posts in posts.values()),
        follows_created=follows,
        likes_created=likes,
    )
    await close_database()


if __name__ == "__main__":
    asyncio.run(seed_database())
