"""Post model."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codity.models.base import Base, IntegerIDMixin, generate_repr

if TYPE_CHECKING:
    from codity.models.post_like import PostLike
    from codity.models.user import User


class Post(Base, IntegerIDMixin):
    """A post authored by a user.

    Attributes:
        id: Primary key
        user_id: Author
        text: Post body
        creation_date: When the post was published; drives recency ordering
        user: Author record
        likes: Likes received
    """

    class Include(str, Enum):
        """Relations that can be eagerly loaded with a post."""

        USER = "user"
        LIKES = "likes"

    __tablename__ = "posts"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="posts")
    likes: Mapped[list["PostLike"]] = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_posts_user_id_creation_date", "user_id", "creation_date"),
    )

    __repr__ = generate_repr("id", "user_id", "creation_date")
