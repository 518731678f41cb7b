from watchroom.schemas.user import DiscordProfile, UserResponse, SiteRoleUpdate, GlobalNameResponse
from watchroom.schemas.video import VideoCreate, VideoResponse
from watchroom.schemas.room import (
    RoomCreate, RoomLocator, RoomCreated, RoomResponse, MemberRequest,
    MemberRoleRequest, QueueRequest, RoomEndResponse, AccessResponse,
)
from watchroom.schemas.chat import ChatMessageCreate, ChatEntryResponse, ChatResponse

__all__ = [
    "DiscordProfile", "UserResponse", "SiteRoleUpdate", "GlobalNameResponse",
    "VideoCreate", "VideoResponse",
    "RoomCreate", "RoomLocator", "RoomCreated", "RoomResponse", "MemberRequest",
    "MemberRoleRequest", "QueueRequest", "RoomEndResponse", "AccessResponse",
    "ChatMessageCreate", "ChatEntryResponse", "ChatResponse",
]
