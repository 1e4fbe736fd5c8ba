"""User profile, follow and search endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from codity.api.deps import CurrentUserId, UserServiceDep
from codity.core.logging import get_logger
from codity.schemas.dtos import BaseUserDTO, UserDTO
from codity.schemas.requests import (
    FollowingRequest,
    PaginationRequest,
    SearchUserRequest,
    UserProfileRequest,
)
from codity.schemas.responses import BaseResponse, PagedResponse, Response

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

PageNumber = Annotated[int, Query(ge=1, description="1-based page number")]
PageSize = Annotated[int, Query(ge=1, le=100, description="Items per page")]


def _respond(envelope: BaseResponse) -> BaseResponse | JSONResponse:
    """Return the envelope as-is, or as HTTP 400 when it carries errors."""
    if envelope.success:
        return envelope

    logger.info("Request rejected", errors=[error.message for error in envelope.errors])
    return JSONResponse(status_code=400, content=envelope.model_dump(mode="json"))


@router.get("", response_model=PagedResponse[BaseUserDTO])
async def search_users(
    service: UserServiceDep,
    current_user_id: CurrentUserId,
    query: Annotated[str, Query(max_length=100)] = "",
    page_number: PageNumber = 1,
    page_size: PageSize = 10,
) -> BaseResponse | JSONResponse:
    search = SearchUserRequest(query=query, page_number=page_number, page_size=page_size)
    return _respond(await service.get_users(search, current_user_id))


@router.get("/{user_id}", response_model=Response[UserDTO])
async def get_user(
    user_id: int,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
) -> BaseResponse | JSONResponse:
    return _respond(await service.get_user(user_id, current_user_id))


@router.get("/{user_id}/followers", response_model=PagedResponse[BaseUserDTO])
async def get_followers(
    user_id: int,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
    page_number: PageNumber = 1,
    page_size: PageSize = 10,
) -> BaseResponse | JSONResponse:
    pagination = PaginationRequest(page_number=page_number, page_size=page_size)
    return _respond(await service.get_followers(user_id, current_user_id, pagination))


@router.get("/{user_id}/following", response_model=PagedResponse[BaseUserDTO])
async def get_following(
    user_id: int,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
    page_number: PageNumber = 1,
    page_size: PageSize = 10,
) -> BaseResponse | JSONResponse:
    pagination = PaginationRequest(page_number=page_number, page_size=page_size)
    return _respond(await service.get_following(user_id, current_user_id, pagination))


@router.post("/follow", response_model=BaseResponse)
async def follow_user(
    request: FollowingRequest,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
) -> BaseResponse | JSONResponse:
    return _respond(await service.follow_user(current_user_id, request))


@router.post("/unfollow", response_model=BaseResponse)
async def unfollow_user(
    request: FollowingRequest,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
) -> BaseResponse | JSONResponse:
    return _respond(await service.unfollow_user(current_user_id, request))


@router.put("/profile", response_model=BaseResponse)
async def update_profile(
    request: UserProfileRequest,
    service: UserServiceDep,
    current_user_id: CurrentUserId,
) -> BaseResponse | JSONResponse:
    return _respond(await service.update_user_profile(current_user_id, request))
