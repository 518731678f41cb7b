from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from watchroom.models.room import RoomRole


class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    owner_id: UUID
    url: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=32)
    members: list[UUID] = Field(default_factory=list)
    role_map: dict[UUID, RoomRole] = Field(default_factory=dict)
    videos: list[UUID] = Field(default_factory=list)


class RoomLocator(BaseModel):
    """Shareable url plus short join code issued for a new room"""
    url: str
    code: str


class RoomCreated(BaseModel):
    url: str


class RoomResponse(BaseModel):
    id: UUID
    url: str
    name: str
    owner_id: UUID
    code: str
    members: list[UUID] = []
    role_map: dict[UUID, RoomRole] = {}
    videos: list[UUID] = []
    created_at: datetime

    class Config:
        from_attributes = True


class MemberRequest(BaseModel):
    user_id: UUID


class MemberRoleRequest(BaseModel):
    user_id: UUID
    role: RoomRole


class QueueRequest(BaseModel):
    video_id: UUID


class RoomEndResponse(BaseModel):
    deleted_count: int


class AccessResponse(BaseModel):
    allowed: bool
