from uuid import UUID
from fastapi import APIRouter, status
from watchroom.routers.deps import Queries
from watchroom.schemas.chat import ChatMessageCreate, ChatResponse
from watchroom.exceptions import NotFoundException

router = APIRouter(prefix="/api/chats", tags=["Chat"])


@router.get("/{room_id}", response_model=ChatResponse)
async def get_chat(room_id: UUID, queries: Queries):
    chat = await queries.get_chat(room_id)
    if chat is None:
        raise NotFoundException("Chat", {"room_id": str(room_id)})
    return chat


@router.post("/{room_id}", response_model=ChatResponse, status_code=status.HTTP_201_CREATED)
async def create_chat(room_id: UUID, queries: Queries):
    return await queries.add_chat_session(room_id)


@router.post("/{room_id}/messages", response_model=ChatResponse)
async def add_message(room_id: UUID, body: ChatMessageCreate, queries: Queries):
    """Empty messages are accepted and ignored"""
    chat = await queries.add_chat_message(room_id, body.user_id, body.message, body.global_name)
    if chat is None:
        return ChatResponse(room_id=room_id, messages=[])
    return chat
