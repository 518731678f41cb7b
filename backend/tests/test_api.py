import uuid

import pytest
from fastapi.testclient import TestClient

from tests.conftest import make_profile
from watchroom.database import Database
from watchroom.main import create_app


@pytest.fixture
def client():
    app = create_app(Database("sqlite+aiosqlite://", echo=False), configure_logging=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner_id(client):
    response = client.post("/api/users/login", json=make_profile("owner", global_name="Host"))
    assert response.status_code == 200
    return response.json()["id"]


@pytest.fixture
def room_url(client, owner_id):
    response = client.post(
        "/api/rooms",
        json={"name": "Movie night", "owner_id": owner_id, "url": "room/abc123", "code": "XYZ1"},
    )
    assert response.status_code == 201
    return response.json()["url"]


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database_connected"] is True


def test_room_lifecycle(client, room_url):
    assert room_url == "room/abc123"
    user = str(uuid.uuid4())
    video = str(uuid.uuid4())

    by_code = client.get("/api/rooms/by-code/XYZ1").json()
    assert by_code["url"] == room_url

    response = client.post("/api/rooms/members", params={"url": room_url}, json={"user_id": user})
    assert response.json()["members"] == [user]

    response = client.post("/api/rooms/queue", params={"url": room_url}, json={"video_id": video})
    assert response.json()["videos"] == [video]

    response = client.delete(f"/api/rooms/members/{user}", params={"url": room_url})
    assert response.json()["members"] == []

    assert client.delete("/api/rooms", params={"url": room_url}).json() == {"deleted_count": 1}
    assert client.delete("/api/rooms", params={"url": room_url}).json() == {"deleted_count": 0}
    assert client.get("/api/rooms/by-url", params={"url": room_url}).status_code == 404


def test_missing_room_uses_error_body(client):
    response = client.post(
        "/api/rooms/members", params={"url": "room/missing"}, json={"user_id": str(uuid.uuid4())}
    )

    body = response.json()
    assert response.status_code == 404
    assert body["success"] is False
    assert body["error"] == "ROOM_001"


def test_duplicate_room_is_conflict(client, owner_id, room_url):
    response = client.post(
        "/api/rooms",
        json={"name": "Again", "owner_id": owner_id, "url": room_url, "code": "OTHER"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "DB_003"


def test_create_room_without_code_is_rejected(client, owner_id):
    response = client.post(
        "/api/rooms", json={"name": "No code", "owner_id": owner_id, "url": "room/nocode"}
    )

    assert response.status_code == 422
    assert response.json()["error"] == "VAL_001"


def test_locator_then_create(client, owner_id):
    locator = client.post("/api/rooms/locator").json()

    response = client.post("/api/rooms", json={"name": "Issued", "owner_id": owner_id, **locator})

    assert response.status_code == 201
    assert response.json()["url"] == locator["url"]


def test_video_access_and_roles(client, owner_id, room_url):
    admin = str(uuid.uuid4())

    def allowed(user_id):
        return client.get(f"/api/rooms/access/{user_id}", params={"url": room_url}).json()["allowed"]

    assert allowed(owner_id) is True
    assert allowed(admin) is False

    response = client.put("/api/rooms/roles", params={"url": room_url}, json={"user_id": admin, "role": "admin"})
    assert response.json()["role_map"] == {admin: "admin"}
    assert allowed(admin) is True


def test_chat_flow(client, owner_id):
    room_id = str(uuid.uuid4())

    assert client.get(f"/api/chats/{room_id}").status_code == 404

    empty = client.post(
        f"/api/chats/{room_id}/messages", json={"user_id": owner_id, "message": "", "global_name": "Host"}
    )
    assert empty.json()["messages"] == []

    response = client.post(
        f"/api/chats/{room_id}/messages", json={"user_id": owner_id, "message": "hi", "global_name": "Host"}
    )
    messages = response.json()["messages"]
    assert [m["message"] for m in messages] == ["Welcome to the chat", "hi"]
    assert messages[0]["global_name"] == "System"


def test_user_endpoints(client, owner_id):
    assert client.get(f"/api/users/{owner_id}/global-name").json()["global_name"] == "Host"
    assert client.get(f"/api/users/{uuid.uuid4()}/global-name").status_code == 404

    response = client.patch(f"/api/users/{owner_id}/role", json={"role": "privileged"})
    assert response.json()["site_role"] == "privileged"

    video = client.post(
        f"/api/users/{owner_id}/videos",
        json={"owner_id": owner_id, "name": "Clip", "url": "https://example.com/clip.mp4"},
    )
    assert video.status_code == 201
    assert [v["name"] for v in client.get(f"/api/users/{owner_id}/videos").json()] == ["Clip"]


def test_room_lookup_by_url(client, room_url):
    response = client.get("/api/rooms/by-url", params={"url": room_url})

    assert response.status_code == 200
    assert response.json()["code"] == "XYZ1"
    assert client.get("/api/rooms/by-code/NOPE").json()["error"] == "ROOM_001"


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "DB_002",
        "message": "Not Found",
        "status_code": 404,
    }


def test_request_validation_lists_fields(client, owner_id):
    response = client.post("/api/rooms", json={"owner_id": owner_id, "url": "room/x", "code": "X1"})

    fields = [error["field"] for error in response.json()["details"]["validation_errors"]]
    assert response.status_code == 422
    assert fields == ["name"]
