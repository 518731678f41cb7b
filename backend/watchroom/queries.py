"""
Query facade for the watch-room store.

``WatchRoomQueries`` is the single entry point used by the API layer (or
any in-process caller). Each method is one unit of work: it opens a
session on the injected ``Database``, delegates to the room/chat/user
services and commits. Read paths return ``None`` for missing records;
mutations on a missing room raise ``RoomNotFoundException``.
"""
import uuid
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from watchroom.config import settings
from watchroom.database import Database
from watchroom.exceptions import (
    ConcurrentUpdateException,
    InvalidInputException,
    UniquenessViolationException,
    ValidationException,
)
from watchroom.models.chat import Chat
from watchroom.models.room import Room, RoomRole
from watchroom.models.user import User, SiteRole
from watchroom.models.video import Video
from watchroom.schemas.room import RoomCreate, RoomLocator
from watchroom.schemas.user import DiscordProfile
from watchroom.schemas.video import VideoCreate
from watchroom.services.chat_service import ChatService
from watchroom.services.identifier_service import IdentifierService
from watchroom.services.room_service import RoomService
from watchroom.services.user_service import UserService
from watchroom.services.video_service import VideoService
from watchroom.utils.logging_config import database_logger

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def _as_uuid(value: uuid.UUID | str, field: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidInputException(field, "Not a valid UUID")


def _validate(model: type[M], data: M | dict[str, Any]) -> M:
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationException.from_pydantic(exc) from exc


def _as_enum(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidInputException(field, f"Expected one of: {allowed}")


class WatchRoomQueries:
    def __init__(self, database: Database, max_retries: int | None = None):
        self.database = database
        if max_retries is None:
            max_retries = settings.ROOM_UPDATE_MAX_RETRIES
        elif max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        # total attempts per optimistic operation, the first one included
        self.max_retries = max_retries

    async def _run(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self.database.session() as session:
            return await operation(session)

    async def _run_optimistic(
        self,
        operation: Callable[[AsyncSession], Awaitable[T]],
        resource: str,
        retry_on: tuple[type[Exception], ...] = (StaleDataError,),
    ) -> T:
        """
        Run ``operation`` in a fresh session, re-running it from scratch when
        a concurrent writer got there first.
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return await self._run(operation)
            except retry_on as exc:
                database_logger.warning(
                    "Concurrent update detected, retrying",
                    extra={"resource": resource, "attempt": attempt, "error": type(exc).__name__}
                )
        raise ConcurrentUpdateException(resource, self.max_retries)

    # ==================== Rooms ====================

    async def issue_room_locator(self) -> RoomLocator:
        return await self._run(lambda db: IdentifierService(db).issue_locator())

    async def create_room(self, room: RoomCreate | dict[str, Any]) -> str:
        """Persist a new room and return its shareable url"""
        room_data = _validate(RoomCreate, room)
        created = await self._run(lambda db: RoomService(db).create_room(room_data))
        return created.url

    async def check_room(self, room_url: str) -> Room | None:
        return await self._run(lambda db: RoomService(db).find_room_by_url(room_url))

    async def get_room(self, room_code: str) -> Room | None:
        return await self._run(lambda db: RoomService(db).find_room_by_code(room_code))

    async def add_viewer(self, room_url: str, user_id: uuid.UUID | str) -> Room:
        member = _as_uuid(user_id, "user_id")
        return await self._run_optimistic(
            lambda db: RoomService(db).add_member(room_url, member), "Room"
        )

    async def remove_viewer(self, room_url: str, user_id: uuid.UUID | str) -> Room:
        member = _as_uuid(user_id, "user_id")
        return await self._run_optimistic(
            lambda db: RoomService(db).remove_member(room_url, member), "Room"
        )

    async def set_viewer_role(
        self, room_url: str, user_id: uuid.UUID | str, role: RoomRole | str
    ) -> Room:
        member = _as_uuid(user_id, "user_id")
        room_role = _as_enum(RoomRole, role, "role")
        return await self._run_optimistic(
            lambda db: RoomService(db).set_member_role(room_url, member, room_role), "Room"
        )

    async def add_video_to_queue(self, room_url: str, video_id: uuid.UUID | str) -> Room:
        video = _as_uuid(video_id, "video_id")
        return await self._run_optimistic(
            lambda db: RoomService(db).enqueue_video(room_url, video), "Room"
        )

    async def check_owner_video_access(self, room_url: str, user_id: uuid.UUID | str) -> bool:
        member = _as_uuid(user_id, "user_id")
        return await self._run(
            lambda db: RoomService(db).check_owner_video_access(room_url, member)
        )

    async def end_room(self, room_url: str) -> int:
        return await self._run(lambda db: RoomService(db).end_room(room_url))

    async def get_global_name(self, user_id: uuid.UUID | str) -> str:
        owner = _as_uuid(user_id, "user_id")
        return await self._run(lambda db: RoomService(db).get_owner_display_name(owner))

    # ==================== Chat ====================

    async def get_chat(self, room_id: uuid.UUID | str) -> Chat | None:
        room = _as_uuid(room_id, "room_id")
        return await self._run(lambda db: ChatService(db).get_chat_log(room))

    async def add_chat_session(self, room_id: uuid.UUID | str) -> Chat:
        room = _as_uuid(room_id, "room_id")
        return await self._run_optimistic(
            lambda db: ChatService(db).create_chat_log(room),
            "Chat",
            retry_on=(UniquenessViolationException,),
        )

    async def add_chat_message(
        self,
        room_id: uuid.UUID | str,
        user_id: uuid.UUID | str,
        message: str,
        global_name: str,
    ) -> Chat | None:
        room = _as_uuid(room_id, "room_id")
        author = _as_uuid(user_id, "user_id")
        return await self._run_optimistic(
            lambda db: ChatService(db).append_message(room, author, message, global_name),
            "Chat",
            retry_on=(UniquenessViolationException,),
        )

    # ==================== Users & Videos ====================

    async def register_user(self, profile: DiscordProfile | dict[str, Any]) -> User:
        profile_data = _validate(DiscordProfile, profile)
        return await self._run(lambda db: UserService(db).register_login(profile_data))

    async def get_user(self, user_id: uuid.UUID | str) -> User | None:
        user = _as_uuid(user_id, "user_id")
        return await self._run(lambda db: UserService(db).get_user(user))

    async def set_site_role(self, user_id: uuid.UUID | str, role: SiteRole | str) -> User:
        user = _as_uuid(user_id, "user_id")
        site_role = _as_enum(SiteRole, role, "role")
        return await self._run(lambda db: UserService(db).set_site_role(user, site_role))

    async def register_video(self, video: VideoCreate | dict[str, Any]) -> Video:
        video_data = _validate(VideoCreate, video)
        return await self._run(lambda db: VideoService(db).register_video(video_data))

    async def get_user_videos(self, owner_id: uuid.UUID | str) -> list[Video]:
        owner = _as_uuid(owner_id, "owner_id")
        return await self._run(lambda db: VideoService(db).list_user_videos(owner))
