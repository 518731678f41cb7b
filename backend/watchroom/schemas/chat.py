from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field


class ChatMessageCreate(BaseModel):
    """Empty message is accepted here and ignored by the chat log"""
    user_id: UUID
    message: str = ""
    global_name: str = Field(..., min_length=1, max_length=100)


class ChatEntryResponse(BaseModel):
    user_id: UUID
    message: str
    global_name: str
    created_at: datetime

    class Config:
        from_attributes = True


class ChatResponse(BaseModel):
    room_id: UUID
    messages: list[ChatEntryResponse] = []

    class Config:
        from_attributes = True
