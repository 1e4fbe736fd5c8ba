"""Pydantic request, DTO and response envelope models."""

from codity.schemas.dtos import BaseUserDTO, PostDTO, UserDTO
from codity.schemas.requests import (
    FollowingRequest,
    PaginationRequest,
    SearchUserRequest,
    UserProfileRequest,
)
from codity.schemas.responses import BaseResponse, Error, PagedResponse, Response

__all__ = [
    "BaseResponse",
    "BaseUserDTO",
    "Error",
    "FollowingRequest",
    "PagedResponse",
    "PaginationRequest",
    "PostDTO",
    "Response",
    "SearchUserRequest",
    "UserDTO",
    "UserProfileRequest",
]
