"""Notification generation for social events."""

from sqlalchemy.ext.asyncio import AsyncSession

from codity.core.logging import get_logger
from codity.core.tracing import trace_async
from codity.models.notification import Notification, NotificationType
from codity.models.user import User
from codity.repositories.base import BaseRepository


class NotificationGeneratorService:
    """Creates notifications addressed to the user affected by an action."""

    def __init__(self, notification_repository: BaseRepository[Notification]) -> None:
        self._notifications = notification_repository
        self._logger = get_logger(f"{__name__}.NotificationGeneratorService")

    @classmethod
    def from_session(cls, session: AsyncSession) -> "NotificationGeneratorService":
        return cls(BaseRepository(session, Notification))

    @trace_async(component="service")
    async def create_follow_notification(self, follower: User, following: User) -> Notification:
        """Tell ``following`` that ``follower`` started following them."""
        notification = await self._notifications.add(
            Notification(
                user_id=following.id,
                sender_id=follower.id,
                type=NotificationType.FOLLOW,
                is_read=False,
            )
        )

        self._logger.info(
            "Follow notification created",
            notification_id=notification.id,
            recipient_id=following.id,
            sender_id=follower.id,
        )
        return notification
