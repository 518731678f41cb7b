import uuid

import pytest

from watchroom.exceptions import (
    InvalidInputException,
    RoomNotFoundException,
    UniquenessViolationException,
    UserNotFoundException,
    ValidationException,
)
from watchroom.models.room import RoomRole
from watchroom.schemas.room import RoomResponse


async def test_create_room_returns_url_and_is_found_by_url(queries, room_spec):
    members = [uuid.uuid4(), uuid.uuid4()]
    videos = [uuid.uuid4()]
    data = {**room_spec, "members": members, "role_map": {members[0]: "remote"}, "videos": videos}

    url = await queries.create_room(data)

    assert url == "room/abc123"
    room = RoomResponse.model_validate(await queries.check_room(url))
    assert isinstance(room.id, uuid.UUID)
    assert room.name == data["name"]
    assert room.owner_id == data["owner_id"]
    assert room.code == data["code"]
    assert room.members == members
    assert room.role_map == {members[0]: RoomRole.REMOTE}
    assert room.videos == videos


async def test_scenario_join_by_code_then_leave(queries, room_spec):
    url = await queries.create_room(room_spec)
    assert url == "room/abc123"

    by_code = await queries.get_room("XYZ1")
    by_url = await queries.check_room(url)
    assert by_code is not None
    assert by_code.id == by_url.id

    user = uuid.uuid4()
    room = await queries.add_viewer(url, user)
    assert room.members == [str(user)]

    room = await queries.remove_viewer(url, user)
    assert room.members == []
    assert (await queries.check_room(url)).members == []


async def test_lookups_return_none_when_missing(queries):
    assert await queries.check_room("room/missing") is None
    assert await queries.get_room("NOPE") is None


@pytest.mark.parametrize("missing", ["name", "owner_id", "url", "code"])
async def test_create_room_requires_fields(queries, room_spec, missing):
    data = dict(room_spec)
    del data[missing]

    with pytest.raises(ValidationException) as exc_info:
        await queries.create_room(data)

    fields = [error["field"] for error in exc_info.value.details["validation_errors"]]
    assert missing in fields


async def test_create_room_rejects_unknown_owner(queries, room_spec):
    data = {**room_spec, "owner_id": uuid.uuid4()}

    with pytest.raises(InvalidInputException):
        await queries.create_room(data)


async def test_create_room_rejects_unknown_room_role(queries, room_spec):
    data = {**room_spec, "role_map": {str(uuid.uuid4()): "superuser"}}

    with pytest.raises(ValidationException):
        await queries.create_room(data)


@pytest.mark.parametrize(
    "override",
    [{"code": "OTHER"}, {"url": "room/other"}],
    ids=["duplicate-url", "duplicate-code"],
)
async def test_create_room_rejects_duplicate_url_or_code(queries, room_spec, override):
    await queries.create_room(room_spec)

    with pytest.raises(UniquenessViolationException):
        await queries.create_room({**room_spec, **override})

    # the failed insert must not leave a half-created room behind
    assert await queries.check_room("room/other") is None


async def test_add_viewer_appends_without_dedup(queries, room_spec):
    url = await queries.create_room(room_spec)
    a, b = uuid.uuid4(), uuid.uuid4()

    await queries.add_viewer(url, a)
    await queries.add_viewer(url, b)
    room = await queries.add_viewer(url, a)

    assert room.members == [str(a), str(b), str(a)]


async def test_remove_viewer_removes_every_occurrence(queries, room_spec):
    url = await queries.create_room(room_spec)
    a, b = uuid.uuid4(), uuid.uuid4()
    for member in (a, b, a):
        await queries.add_viewer(url, member)

    room = await queries.remove_viewer(url, a)

    assert room.members == [str(b)]


async def test_remove_viewer_drops_room_role(queries, room_spec):
    url = await queries.create_room(room_spec)
    user = uuid.uuid4()
    await queries.add_viewer(url, user)
    await queries.set_viewer_role(url, user, RoomRole.ADMIN)

    room = await queries.remove_viewer(url, user)

    assert str(user) not in room.role_map


async def test_set_viewer_role_rejects_unknown_role(queries, room_spec):
    url = await queries.create_room(room_spec)

    with pytest.raises(InvalidInputException):
        await queries.set_viewer_role(url, uuid.uuid4(), "owner")


async def test_video_queue_is_fifo(queries, room_spec):
    url = await queries.create_room(room_spec)
    v1, v2, v3 = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    for video in (v1, v2, v3):
        await queries.add_video_to_queue(url, video)
    # duplicates are queued again, not merged
    await queries.add_video_to_queue(url, v1)

    room = await queries.check_room(url)
    assert room.videos == [str(v1), str(v2), str(v3), str(v1)]


@pytest.mark.parametrize("operation", ["add_viewer", "remove_viewer", "add_video_to_queue"])
async def test_mutations_on_missing_room_raise(queries, operation):
    with pytest.raises(RoomNotFoundException):
        await getattr(queries, operation)("room/missing", uuid.uuid4())


async def test_mutation_rejects_malformed_user_id(queries, room_spec):
    url = await queries.create_room(room_spec)

    with pytest.raises(InvalidInputException):
        await queries.add_viewer(url, "not-a-uuid")


async def test_end_room_deletes_and_is_idempotent(queries, room_spec):
    url = await queries.create_room(room_spec)

    assert await queries.end_room(url) == 1
    assert await queries.check_room(url) is None
    assert await queries.end_room(url) == 0
    assert await queries.end_room("room/never-existed") == 0


async def test_ended_room_url_can_be_reused(queries, room_spec):
    url = await queries.create_room(room_spec)
    await queries.end_room(url)

    assert await queries.create_room(room_spec) == url


async def test_get_global_name(queries, owner):
    assert await queries.get_global_name(owner.id) == "Room Owner"

    with pytest.raises(UserNotFoundException):
        await queries.get_global_name(uuid.uuid4())


async def test_owner_video_access(queries, room_spec, owner):
    url = await queries.create_room(room_spec)
    admin, viewer = uuid.uuid4(), uuid.uuid4()
    await queries.set_viewer_role(url, admin, "admin")
    await queries.set_viewer_role(url, viewer, "viewer")

    assert await queries.check_owner_video_access(url, owner.id) is True
    assert await queries.check_owner_video_access(url, admin) is True
    assert await queries.check_owner_video_access(url, viewer) is False
    assert await queries.check_owner_video_access(url, uuid.uuid4()) is False
    assert await queries.check_owner_video_access("room/missing", owner.id) is False
