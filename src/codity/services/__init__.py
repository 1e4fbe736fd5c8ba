"""Business services returning response envelopes."""

from codity.services.errors import ErrorMessage
from codity.services.notifications import NotificationGeneratorService
from codity.services.users import LATEST_POSTS_COUNT, UserService

__all__ = [
    "ErrorMessage",
    "LATEST_POSTS_COUNT",
    "NotificationGeneratorService",
    "UserService",
]
