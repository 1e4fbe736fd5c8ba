"""User model."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codity.models.base import Base, IntegerIDMixin, TimestampMixin, generate_repr

if TYPE_CHECKING:
    from codity.models.follow import Follow
    from codity.models.post import Post
    from codity.models.post_like import PostLike


class User(Base, IntegerIDMixin, TimestampMixin):
    """A registered member of the network.

    Attributes:
        id: Primary key
        username: Unique handle
        email: Unique e-mail address
        first_name: Given name
        last_name: Family name
        image: Avatar URL
        about: Free-text profile description
        posts: Posts authored by the user
        followers: Incoming follow edges (other users following this one)
        following: Outgoing follow edges (users this one follows)
        likes: Likes the user has given
    """

    class Include(str, Enum):
        """Relations that can be eagerly loaded with a user."""

        POSTS = "posts"
        FOLLOWERS = "followers"
        FOLLOWING = "following"

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    about: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    posts: Mapped[list["Post"]] = relationship(
        "Post",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    followers: Mapped[list["Follow"]] = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    following: Mapped[list["Follow"]] = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    likes: Mapped[list["PostLike"]] = relationship(
        "PostLike",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_users_first_last_name", "first_name", "last_name"),
    )

    __repr__ = generate_repr("id", "username")
