from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from watchroom.models.chat import Chat, ChatMessage
from watchroom.config import settings
from watchroom.exceptions import InvalidInputException, UniquenessViolationException
from watchroom.utils.logging_config import chat_logger


class ChatService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_chat_log(self, room_id: UUID) -> Chat | None:
        result = await self.db.execute(select(Chat).where(Chat.room_id == room_id))
        return result.scalar_one_or_none()

    async def create_chat_log(self, room_id: UUID) -> Chat:
        """
        Create the room's log seeded with the system welcome message.

        Returns the existing log untouched if the room already has one.
        Two sessions creating concurrently collide on chats.room_id and the
        loser raises UniquenessViolationException.
        """
        existing = await self.get_chat_log(room_id)
        if existing is not None:
            return existing

        chat = Chat(
            room_id=room_id,
            messages=[
                ChatMessage(
                    user_id=UUID(settings.SYSTEM_ID),
                    message=settings.WELCOME_MESSAGE,
                    global_name=settings.SYSTEM_NAME,
                )
            ],
        )
        self.db.add(chat)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            raise UniquenessViolationException("Chat", {"room_id": str(room_id)}) from exc

        chat_logger.info("Chat log created", extra={"room_id": str(room_id)})
        return chat

    async def append_message(
        self, room_id: UUID, user_id: UUID, message: str, global_name: str
    ) -> Chat | None:
        """
        Append a message, creating the log first if the room has none.

        Empty text is ignored entirely: nothing is appended and an absent
        log stays absent (only a non-empty message bootstraps it, so the
        empty check runs before creation). Returns the log, or None if it
        is still absent.
        """
        if not message:
            return await self.get_chat_log(room_id)
        if len(message) > settings.MAX_CHAT_MESSAGE_LENGTH:
            raise InvalidInputException(
                "message", f"Longer than {settings.MAX_CHAT_MESSAGE_LENGTH} characters"
            )

        chat = await self.get_chat_log(room_id)
        if chat is None:
            chat = await self.create_chat_log(room_id)

        chat.messages.append(
            ChatMessage(user_id=user_id, message=message, global_name=global_name)
        )
        await self.db.flush()

        chat_logger.debug(
            "Chat message appended",
            extra={"room_id": str(room_id), "user_id": str(user_id), "entry_count": len(chat.messages)}
        )
        return chat
