"""Follow model: a directed edge between two users."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codity.models.base import Base, CreatedAtMixin, IntegerIDMixin, generate_repr

if TYPE_CHECKING:
    from codity.models.user import User


class Follow(Base, IntegerIDMixin, CreatedAtMixin):
    """Directed relationship from ``follower`` to ``following``.

    At most one edge exists per ordered pair and a user cannot follow
    themselves; both rules are enforced by the table itself.
    """

    class Include(str, Enum):
        """Relations that can be eagerly loaded with a follow edge."""

        FOLLOWER = "follower"
        FOLLOWING = "following"

    __tablename__ = "follows"

    follower_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    following_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Relationships
    follower: Mapped["User"] = relationship(
        "User",
        foreign_keys=[follower_id],
        back_populates="following",
    )
    following: Mapped["User"] = relationship(
        "User",
        foreign_keys=[following_id],
        back_populates="followers",
    )

    __table_args__ = (
        Index("idx_follows_follower_id", "follower_id"),
        Index("idx_follows_following_id", "following_id"),
        Index("idx_follows_pair", "follower_id", "following_id", unique=True),
        CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
    )

    __repr__ = generate_repr("id", "follower_id", "following_id")
