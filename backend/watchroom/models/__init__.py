from watchroom.models.user import User, SiteRole
from watchroom.models.video import Video
from watchroom.models.room import Room, RoomRole
from watchroom.models.chat import Chat, ChatMessage

__all__ = ["User", "SiteRole", "Video", "Room", "RoomRole", "Chat", "ChatMessage"]
