"""Notification model."""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from codity.models.base import Base, CreatedAtMixin, IntegerIDMixin, generate_repr

if TYPE_CHECKING:
    from codity.models.user import User


class NotificationType(str, Enum):
    """Kinds of events a user is notified about."""

    FOLLOW = "follow"


class Notification(Base, IntegerIDMixin, CreatedAtMixin):
    """An event addressed to ``user`` and caused by ``sender``.

    Attributes:
        id: Primary key
        user_id: Recipient
        sender_id: User whose action produced the notification
        type: Notification kind
        is_read: Whether the recipient has seen it
    """

    class Include(str, Enum):
        """Relations that can be eagerly loaded with a notification."""

        USER = "user"
        SENDER = "sender"

    __tablename__ = "notifications"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType, native_enum=True),
        nullable=False,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])
    sender: Mapped["User"] = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        Index("idx_notifications_user_id_is_read", "user_id", "is_read"),
    )

    __repr__ = generate_repr("id", "user_id", "sender_id", "type")
