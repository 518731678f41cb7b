import uuid

import pytest
import pytest_asyncio

from watchroom.database import Database
from watchroom.queries import WatchRoomQueries


def make_profile(suffix: str = "1", **overrides) -> dict:
    profile = {
        "discord_id": f"discord-{suffix}",
        "email": f"user{suffix}@example.com",
        "username": f"user{suffix}",
        "global_name": f"User {suffix}",
        "avatar": None,
        "refresh_token": f"refresh-{suffix}",
    }
    profile.update(overrides)
    return profile


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite://", echo=False)
    await db.create_all()
    yield db
    await db.close()


@pytest.fixture
def queries(database):
    return WatchRoomQueries(database)


@pytest_asyncio.fixture
async def owner(queries):
    return await queries.register_user(make_profile("owner", global_name="Room Owner"))


@pytest.fixture
def room_spec(owner):
    return {
        "name": "Movie night",
        "owner_id": owner.id,
        "url": "room/abc123",
        "code": "XYZ1",
    }
