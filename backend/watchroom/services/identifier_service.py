"""Room url and join code issuance."""
import secrets
from typing import Callable
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from watchroom.models.room import Room
from watchroom.schemas.room import RoomLocator
from watchroom.config import settings
from watchroom.exceptions import RoomLocatorExhaustedException
from watchroom.utils.logging_config import room_logger


# No 0/O, 1/I/L: codes are typed in by hand
ROOM_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"


def generate_room_url() -> str:
    return f"{settings.ROOM_URL_PREFIX}{secrets.token_urlsafe(9)}"


def generate_room_code(length: int | None = None) -> str:
    length = length or settings.ROOM_CODE_LENGTH
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


class IdentifierService:
    def __init__(
        self,
        db: AsyncSession,
        url_factory: Callable[[], str] = generate_room_url,
        code_factory: Callable[[], str] = generate_room_code,
    ):
        self.db = db
        self.url_factory = url_factory
        self.code_factory = code_factory

    async def locator_taken(self, url: str, code: str) -> bool:
        result = await self.db.execute(
            select(Room.id).where(or_(Room.url == url, Room.code == code)).limit(1)
        )
        return result.first() is not None

    async def issue_locator(self) -> RoomLocator:
        """
        Generate a url/code pair not used by any existing room.

        The unique constraints on rooms.url and rooms.code still guard the
        insert, since another room may take the pair before it is used.
        """
        attempts = settings.ROOM_LOCATOR_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            url, code = self.url_factory(), self.code_factory()
            if not await self.locator_taken(url, code):
                return RoomLocator(url=url, code=code)
            room_logger.warning(
                "Room locator collision, regenerating",
                extra={"attempt": attempt, "room_url": url, "room_code": code}
            )
        raise RoomLocatorExhaustedException(attempts)
