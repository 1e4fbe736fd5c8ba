"""PostLike model: a user's like on a post."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codity.models.base import Base, CreatedAtMixin, IntegerIDMixin, generate_repr

if TYPE_CHECKING:
    from codity.models.post import Post
    from codity.models.user import User


class PostLike(Base, IntegerIDMixin, CreatedAtMixin):
    """At most one like per (user, post) pair."""

    class Include(str, Enum):
        """Relations that can be eagerly loaded with a like."""

        USER = "user"
        POST = "post"

    __tablename__ = "post_likes"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="likes")
    post: Mapped["Post"] = relationship("Post", back_populates="likes")

    __table_args__ = (
        Index("idx_post_likes_post_id", "post_id"),
        Index("idx_post_likes_user_post", "user_id", "post_id", unique=True),
    )

    __repr__ = generate_repr("id", "user_id", "post_id")
