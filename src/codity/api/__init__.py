"""HTTP routers."""

from codity.api import users

__all__ = ["users"]
