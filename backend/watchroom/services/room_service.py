from uuid import UUID
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from watchroom.models.room import Room, RoomRole
from watchroom.models.user import User
from watchroom.schemas.room import RoomCreate
from watchroom.services.user_service import UserService
from watchroom.exceptions import (
    InvalidInputException,
    RoomNotFoundException,
    UniquenessViolationException,
)
from watchroom.utils.logging_config import room_logger


class RoomService:
    """
    Room lifecycle: create, look up, end, membership and video queue.

    Mutations load the row, change a copy of the JSON column and flush.
    The flush is guarded by the room's version column, so a write based on
    a stale read raises ``StaleDataError`` instead of overwriting.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_room(self, room_data: RoomCreate) -> Room:
        owner = await self.db.get(User, room_data.owner_id)
        if owner is None:
            raise InvalidInputException("owner_id", "Owner does not reference an existing user")

        room = Room(
            name=room_data.name,
            url=room_data.url,
            code=room_data.code,
            owner_id=room_data.owner_id,
            members=[str(member) for member in room_data.members],
            role_map={str(user_id): role.value for user_id, role in room_data.role_map.items()},
            videos=[str(video) for video in room_data.videos],
        )
        self.db.add(room)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            room_logger.warning(
                "Room url or code already in use",
                extra={"room_url": room_data.url, "room_code": room_data.code}
            )
            raise UniquenessViolationException(
                "Room", {"room_url": room_data.url, "room_code": room_data.code}
            ) from exc

        room_logger.info(
            "Room created",
            extra={
                "room_id": str(room.id),
                "room_name": room.name,
                "owner_id": str(room.owner_id),
                "room_url": room.url,
                "room_code": room.code,
            }
        )
        return room

    async def find_room_by_url(self, url: str) -> Room | None:
        result = await self.db.execute(select(Room).where(Room.url == url))
        return result.scalar_one_or_none()

    async def find_room_by_code(self, code: str) -> Room | None:
        result = await self.db.execute(select(Room).where(Room.code == code))
        return result.scalar_one_or_none()

    async def _require_room(self, url: str) -> Room:
        room = await self.find_room_by_url(url)
        if room is None:
            room_logger.warning("Room not found", extra={"room_url": url})
            raise RoomNotFoundException(url)
        return room

    async def add_member(self, url: str, user_id: UUID) -> Room:
        room = await self._require_room(url)
        room.members = [*room.members, str(user_id)]
        await self.db.flush()

        room_logger.info(
            "Member added",
            extra={"room_id": str(room.id), "user_id": str(user_id), "member_count": len(room.members)}
        )
        return room

    async def remove_member(self, url: str, user_id: UUID) -> Room:
        """Drop every occurrence of the user and their room role"""
        room = await self._require_room(url)
        key = str(user_id)
        room.members = [member for member in room.members if member != key]
        if key in room.role_map:
            room.role_map = {uid: role for uid, role in room.role_map.items() if uid != key}
        await self.db.flush()

        room_logger.info(
            "Member removed",
            extra={"room_id": str(room.id), "user_id": key, "member_count": len(room.members)}
        )
        return room

    async def set_member_role(self, url: str, user_id: UUID, role: RoomRole) -> Room:
        room = await self._require_room(url)
        room.role_map = {**room.role_map, str(user_id): role.value}
        await self.db.flush()

        room_logger.info(
            "Member role set",
            extra={"room_id": str(room.id), "user_id": str(user_id), "room_role": role.value}
        )
        return room

    async def enqueue_video(self, url: str, video_id: UUID) -> Room:
        room = await self._require_room(url)
        room.videos = [*room.videos, str(video_id)]
        await self.db.flush()

        room_logger.info(
            "Video queued",
            extra={"room_id": str(room.id), "video_id": str(video_id), "queue_length": len(room.videos)}
        )
        return room

    async def end_room(self, url: str) -> int:
        """Delete the room; returns the number of rooms deleted (0 or 1)"""
        result = await self.db.execute(delete(Room).where(Room.url == url))
        deleted = result.rowcount or 0
        room_logger.info("Room ended", extra={"room_url": url, "deleted_count": deleted})
        return deleted

    async def get_owner_display_name(self, user_id: UUID) -> str:
        user = await UserService(self.db).require_user(user_id)
        return user.global_name

    async def check_owner_video_access(self, url: str, user_id: UUID) -> bool:
        """
        Whether the user may put videos on this room's queue.

        Allowed for the room owner and for members holding the admin room
        role. A missing room is a deny, not an error.
        """
        room = await self.find_room_by_url(url)
        if room is None:
            return False
        if room.owner_id == user_id:
            return True
        return room.role_map.get(str(user_id)) == RoomRole.ADMIN.value
