"""User profile and follow-graph service.

Each method validates its input, reads through the repositories, projects
entities to DTOs, adds viewer-relative flags (is-liked, is-following) with
one batch query per flag, and returns a response envelope. Domain failures
are reported as envelope errors; storage failures propagate.
"""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from codity.core.logging import get_logger
from codity.core.tracing import trace_async
from codity.models.follow import Follow
from codity.models.post import Post
from codity.models.post_like import PostLike
from codity.models.user import User
from codity.repositories.base import BaseRepository, ConflictError
from codity.repositories.paging import PagedList
from codity.repositories.user import UserRepository
from codity.schemas.dtos import BaseUserDTO, PostDTO, UserDTO
from codity.schemas.requests import (
    FollowingRequest,
    PaginationRequest,
    SearchUserRequest,
    UserProfileRequest,
)
from codity.schemas.responses import BaseResponse, PagedResponse, Response
from codity.services.errors import ErrorMessage
from codity.services.notifications import NotificationGeneratorService

LATEST_POSTS_COUNT = 5


class UserService:
    """Orchestrates profile reads and edits, follows, and user search."""

    def __init__(
        self,
        post_repository: BaseRepository[Post],
        post_like_repository: BaseRepository[PostLike],
        follow_repository: BaseRepository[Follow],
        user_repository: UserRepository,
        notification_generator_service: NotificationGeneratorService,
    ) -> None:
        self._posts = post_repository
        self._post_likes = post_like_repository
        self._follows = follow_repository
        self._users = user_repository
        self._notifications = notification_generator_service
        self._logger = get_logger(f"{__name__}.UserService")

    @classmethod
    def from_session(cls, session: AsyncSession) -> "UserService":
        """Wire the service and its repositories to one session."""
        return cls(
            post_repository=BaseRepository(session, Post),
            post_like_repository=BaseRepository(session, PostLike),
            follow_repository=BaseRepository(session, Follow),
            user_repository=UserRepository(session),
            notification_generator_service=NotificationGeneratorService.from_session(session),
        )

    @trace_async(component="service")
    async def get_user(self, user_id: int, current_user_id: int) -> Response[UserDTO]:
        """Load a profile with its latest posts, as seen by ``current_user_id``."""
        response: Response[UserDTO] = Response()

        user = await self._users.get(user_id)
        if user is None:
            response.add_error(ErrorMessage.USER_NOT_FOUND)
            return response

        user_dto = UserDTO.model_validate(user)

        latest = await self._posts.get_paged_by(
            Post.user_id == user_id,
            page_number=1,
            page_size=LATEST_POSTS_COUNT,
            order_by=(Post.creation_date, Post.id),
        )
        user_dto.latest_posts = [PostDTO.model_validate(post) for post in latest]

        post_ids = [post.id for post in user_dto.latest_posts]
        if post_ids:
            likes = await self._post_likes.get_all_by(
                PostLike.post_id.in_(post_ids),
                PostLike.user_id == current_user_id,
            )
            liked_ids = {like.post_id for like in likes}
            for post in user_dto.latest_posts:
                post.is_liked = post.id in liked_ids

        user_dto.is_following = await self._follows.exist(
            Follow.follower_id == current_user_id,
            Follow.following_id == user_id,
        )

        response.model = user_dto
        return response

    @trace_async(component="service")
    async def unfollow_user(self, user_id: int, following: FollowingRequest) -> BaseResponse:
        """Delete the edge ``user_id -> following.following_id``."""
        response = BaseResponse()

        follow = await self._follows.get_by(
            Follow.follower_id == user_id,
            Follow.following_id == following.following_id,
        )
        if follow is None:
            response.add_error(ErrorMessage.FOLLOW_NOT_FOUND)
            return response

        await self._follows.remove(follow)

        self._logger.info(
            "User unfollowed", follower_id=user_id, following_id=following.following_id
        )
        return response

    @trace_async(component="service")
    async def follow_user(self, user_id: int, following: FollowingRequest) -> BaseResponse:
        """Create the edge ``user_id -> following.following_id`` and notify.

        Checks run in order: self-follow, then existence of both users, then
        an existing edge. A concurrent duplicate that slips past the existence
        check is rejected by the unique index and reported the same way.
        """
        response = BaseResponse()

        if user_id == following.following_id:
            response.add_error(ErrorMessage.FOLLOWING_YOURSELF)
            return response

        follower_user = await self._users.get(user_id)
        following_user = await self._users.get(following.following_id)

        if follower_user is None or following_user is None:
            response.add_error(ErrorMessage.USER_NOT_FOUND)
            return response

        already_following = await self._follows.exist(
            Follow.follower_id == user_id,
            Follow.following_id == following.following_id,
        )
        if already_following:
            response.add_error(ErrorMessage.FOLLOW_ALREADY_EXISTS)
            return response

        try:
            await self._follows.add(
                Follow(follower_id=user_id, following_id=following.following_id)
            )
        except ConflictError:
            self._logger.warning(
                "Concurrent duplicate follow rejected",
                follower_id=user_id,
                following_id=following.following_id,
            )
            response.add_error(ErrorMessage.FOLLOW_ALREADY_EXISTS)
            return response

        await self._notifications.create_follow_notification(follower_user, following_user)

        self._logger.info(
            "User followed", follower_id=user_id, following_id=following.following_id
        )
        return response

    @trace_async(component="service")
    async def get_followers(
        self,
        user_id: int,
        current_user_id: int,
        pagination: PaginationRequest,
    ) -> PagedResponse[BaseUserDTO]:
        """Page through users following ``user_id``. An empty page is an error."""
        response: PagedResponse[BaseUserDTO] = PagedResponse()

        follows = await self._follows.get_paged_by(
            Follow.following_id == user_id,
            page_number=pagination.page_number,
            page_size=pagination.page_size,
            order_by=Follow.id,
            includes=[Follow.Include.FOLLOWER],
        )
        if not follows:
            response.add_error(ErrorMessage.FOLLOWERS_NOT_FOUND)
            return response

        await self._fill_user_page(
            response, follows, (follow.follower for follow in follows), current_user_id
        )
        return response

    @trace_async(component="service")
    async def get_following(
        self,
        user_id: int,
        current_user_id: int,
        pagination: PaginationRequest,
    ) -> PagedResponse[BaseUserDTO]:
        """Page through users that ``user_id`` follows. An empty page is an error."""
        response: PagedResponse[BaseUserDTO] = PagedResponse()

        follows = await self._follows.get_paged_by(
            Follow.follower_id == user_id,
            page_number=pagination.page_number,
            page_size=pagination.page_size,
            order_by=Follow.id,
            includes=[Follow.Include.FOLLOWING],
        )
        if not follows:
            response.add_error(ErrorMessage.FOLLOWING_NOT_FOUND)
            return response

        await self._fill_user_page(
            response, follows, (follow.following for follow in follows), current_user_id
        )
        return response

    @trace_async(component="service")
    async def get_users(
        self, search: SearchUserRequest, current_user_id: int
    ) -> PagedResponse[BaseUserDTO]:
        """Search users. An empty result is a valid, empty page."""
        response: PagedResponse[BaseUserDTO] = PagedResponse()

        users = await self._users.search(
            search.query,
            search.page_number,
            search.page_size,
            current_user_id,
        )

        await self._fill_user_page(response, users, users, current_user_id)
        return response

    @trace_async(component="service")
    async def update_user_profile(self, user_id: int, profile: UserProfileRequest) -> BaseResponse:
        """Overwrite the user's profile fields with the request values."""
        response = BaseResponse()

        user = await self._users.get(user_id, tracking=True)
        if user is None:
            response.add_error(ErrorMessage.USER_NOT_FOUND)
            return response

        for field, value in profile.model_dump().items():
            setattr(user, field, value)

        await self._users.update(user)

        self._logger.info("User profile updated", user_id=user_id)
        return response

    async def _fill_user_page(
        self,
        response: PagedResponse[BaseUserDTO],
        page: PagedList,
        users: Iterable[User],
        current_user_id: int,
    ) -> None:
        response.set_page_info(page)
        response.models = [BaseUserDTO.model_validate(user) for user in users]

        user_ids = [model.id for model in response.models]
        if not user_ids:
            return

        follows = await self._follows.get_all_by(
            Follow.following_id.in_(user_ids),
            Follow.follower_id == current_user_id,
        )
        followed_ids = {follow.following_id for follow in follows}
        for model in response.models:
            model.is_following = model.id in followed_ids
