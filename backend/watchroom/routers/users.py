from uuid import UUID
from fastapi import APIRouter, status
from watchroom.routers.deps import Queries
from watchroom.schemas.user import DiscordProfile, UserResponse, SiteRoleUpdate, GlobalNameResponse
from watchroom.schemas.video import VideoCreate, VideoResponse
from watchroom.exceptions import UserNotFoundException

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/login", response_model=UserResponse)
async def register_login(profile: DiscordProfile, queries: Queries):
    """Store the identity provider profile after a successful login"""
    return await queries.register_user(profile)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, queries: Queries):
    user = await queries.get_user(user_id)
    if user is None:
        raise UserNotFoundException(str(user_id))
    return user


@router.patch("/{user_id}/role", response_model=UserResponse)
async def set_site_role(user_id: UUID, body: SiteRoleUpdate, queries: Queries):
    return await queries.set_site_role(user_id, body.role)


@router.get("/{user_id}/global-name", response_model=GlobalNameResponse)
async def get_global_name(user_id: UUID, queries: Queries):
    global_name = await queries.get_global_name(user_id)
    return GlobalNameResponse(user_id=user_id, global_name=global_name)


@router.get("/{user_id}/videos", response_model=list[VideoResponse])
async def list_videos(user_id: UUID, queries: Queries):
    return await queries.get_user_videos(user_id)


@router.post("/{user_id}/videos", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def register_video(user_id: UUID, body: VideoCreate, queries: Queries):
    if body.owner_id != user_id:
        body = body.model_copy(update={"owner_id": user_id})
    return await queries.register_video(body)
