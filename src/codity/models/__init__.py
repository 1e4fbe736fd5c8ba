"""Database models."""

from codity.models.base import Base, CreatedAtMixin, IntegerIDMixin, TimestampMixin
from codity.models.follow import Follow
from codity.models.notification import Notification, NotificationType
from codity.models.post import Post
from codity.models.post_like import PostLike
from codity.models.user import User

__all__ = [
    "Base",
    "CreatedAtMixin",
    "IntegerIDMixin",
    "TimestampMixin",
    "Follow",
    "Notification",
    "NotificationType",
    "Post",
    "PostLike",
    "User",
]
