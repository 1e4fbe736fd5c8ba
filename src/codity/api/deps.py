"""FastAPI dependencies shared by routers."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from codity.core.database import get_db
from codity.services.users import UserService


async def get_current_user_id(
    x_user_id: Annotated[int, Header(description="ID of the acting user")],
) -> int:
    """Return the caller's user ID from the ``X-User-Id`` header."""
    return x_user_id


async def get_user_service(
    session: Annotated[AsyncSession, Depends(get_db)],
) -> UserService:
    return UserService.from_session(session)


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
