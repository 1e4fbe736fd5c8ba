"""Domain error messages placed in response envelopes."""


class ErrorMessage:
    """Standardized user-facing error messages."""
    USER_NOT_FOUND = "User not found."
    FOLLOW_NOT_FOUND = "You are not following this user."
    FOLLOWING_YOURSELF = "You cannot follow yourself."
    FOLLOW_ALREADY_EXISTS = "You are already following this user."
    FOLLOWERS_NOT_FOUND = "No followers found."
    FOLLOWING_NOT_FOUND = "No followed users found."
