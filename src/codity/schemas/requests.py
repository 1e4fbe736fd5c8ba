"""Request models accepted by the service layer."""

from pydantic import BaseModel, ConfigDict, Field


class FollowingRequest(BaseModel):
    """Target of a follow or unfollow."""

    following_id: int = Field(..., description="ID of the user to (un)follow")


class PaginationRequest(BaseModel):
    """1-based offset/limit paging."""

    page_number: int = Field(1, ge=1, description="1-based page number")
    page_size: int = Field(10, ge=1, le=100, description="Items per page")


class SearchUserRequest(PaginationRequest):
    """User search with paging."""

    query: str = Field("", max_length=100, description="Text matched against names")


class UserProfileRequest(BaseModel):
    """Editable profile fields. Every field overwrites the stored value."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    about: str | None = Field(None, description="Free-text profile description")
    image: str | None = Field(None, max_length=500, description="Avatar URL")
    model_config = ConfigDict(str_strip_whitespace=True)
