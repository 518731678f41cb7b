"""
Rooms Router for Watch Together

Room creation, lookup, membership, roles, video queue and end-of-room.
Room urls contain slashes, so they travel as the ``url`` query parameter.
"""
from uuid import UUID
from typing import Annotated
from fastapi import APIRouter, Query, status
from watchroom.routers.deps import Queries
from watchroom.schemas.room import (
    RoomCreate, RoomLocator, RoomCreated, RoomResponse, MemberRequest,
    MemberRoleRequest, QueueRequest, RoomEndResponse, AccessResponse,
)
from watchroom.exceptions import RoomNotFoundException
from watchroom.utils.logging_config import room_logger

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])

RoomUrl = Annotated[str, Query(min_length=1, max_length=255, description="Shareable room url")]


@router.post("/locator", response_model=RoomLocator)
async def issue_locator(queries: Queries):
    """Fresh url/join code pair for a room about to be created"""
    return await queries.issue_room_locator()


@router.post("", response_model=RoomCreated, status_code=status.HTTP_201_CREATED)
async def create_room(room_data: RoomCreate, queries: Queries):
    url = await queries.create_room(room_data)
    room_logger.info(
        "Room creation request completed",
        extra={"room_url": url, "owner_id": str(room_data.owner_id)}
    )
    return RoomCreated(url=url)


@router.get("/by-url", response_model=RoomResponse)
async def get_room_by_url(queries: Queries, url: RoomUrl):
    room = await queries.check_room(url)
    if room is None:
        raise RoomNotFoundException(url)
    return room


@router.get("/by-code/{code}", response_model=RoomResponse)
async def get_room_by_code(code: str, queries: Queries):
    room = await queries.get_room(code)
    if room is None:
        raise RoomNotFoundException()
    return room


@router.post("/members", response_model=RoomResponse)
async def add_member(body: MemberRequest, queries: Queries, url: RoomUrl):
    return await queries.add_viewer(url, body.user_id)


@router.delete("/members/{user_id}", response_model=RoomResponse)
async def remove_member(user_id: UUID, queries: Queries, url: RoomUrl):
    return await queries.remove_viewer(url, user_id)


@router.put("/roles", response_model=RoomResponse)
async def set_member_role(body: MemberRoleRequest, queries: Queries, url: RoomUrl):
    return await queries.set_viewer_role(url, body.user_id, body.role)


@router.post("/queue", response_model=RoomResponse)
async def enqueue_video(body: QueueRequest, queries: Queries, url: RoomUrl):
    return await queries.add_video_to_queue(url, body.video_id)


@router.get("/access/{user_id}", response_model=AccessResponse)
async def check_video_access(user_id: UUID, queries: Queries, url: RoomUrl):
    allowed = await queries.check_owner_video_access(url, user_id)
    return AccessResponse(allowed=allowed)


@router.delete("", response_model=RoomEndResponse)
async def end_room(queries: Queries, url: RoomUrl):
    deleted = await queries.end_room(url)
    return RoomEndResponse(deleted_count=deleted)
