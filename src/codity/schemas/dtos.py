"""Response DTOs projected from ORM entities by matching field names."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostDTO(BaseModel):
    """A post as shown on a profile."""

    id: int
    user_id: int
    text: str
    creation_date: datetime
    is_liked: bool = Field(False, description="Whether the viewing user liked the post")
    model_config = ConfigDict(from_attributes=True)


class BaseUserDTO(BaseModel):
    """Compact user representation used in lists."""

    id: int
    first_name: str
    last_name: str
    image: str | None = None
    is_following: bool = Field(False, description="Whether the viewing user follows this user")
    model_config = ConfigDict(from_attributes=True)


class UserDTO(BaseUserDTO):
    """Full profile with the most recent posts."""

    username: str
    about: str | None = None
    latest_posts: list[PostDTO] = Field(default_factory=list)
