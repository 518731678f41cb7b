from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from watchroom.models.user import SiteRole


class DiscordProfile(BaseModel):
    """Profile received from the identity provider on login"""
    discord_id: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=255)
    username: str = Field(..., min_length=1, max_length=100)
    global_name: str = Field(..., min_length=1, max_length=100)
    avatar: str | None = Field(None, max_length=255)
    refresh_token: str | None = Field(None, max_length=512)
    session_token: str | None = Field(None, max_length=1024)


class UserResponse(BaseModel):
    id: UUID
    discord_id: str
    email: str
    username: str
    global_name: str
    avatar: str | None = None
    site_role: SiteRole
    created_at: datetime

    class Config:
        from_attributes = True


class SiteRoleUpdate(BaseModel):
    role: SiteRole


class GlobalNameResponse(BaseModel):
    user_id: UUID
    global_name: str
