import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect

from app.domain.repositories.moderator_repo import DuplicateUidError, ModeratorRepo


@pytest.mark.parametrize("missing", ["uid", "displayName", "email", "role"])
def test_create_requires_fields(client, moderators, moderator_payload, missing):
    body = {k: v for k, v in moderator_payload.items() if k != missing}
    r = client.post("/api/moderators", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "UID, displayName, email, and role are required"}
    assert moderators.docs == []


def test_create_rejects_unknown_role(client, moderators, moderator_payload):
    r = client.post("/api/moderators", json={**moderator_payload, "role": "owner"})
    assert r.status_code == 400
    assert r.json() == {"error": 'Role must be either "admin" or "moderator"'}
    assert moderators.docs == []


def test_create_stores_document(client, moderators, moderator_payload):
    r = client.post("/api/moderators", json={**moderator_payload, "image": "me.png"})
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Moderator added successfully"
    mod = body["moderator"]
    assert ObjectId.is_valid(mod["_id"])
    assert mod["displayName"] == "D"
    assert mod["image"] == "me.png"
    assert "createdAt" in mod

    stored = moderators.docs[0]
    assert stored["displayName"] == "D"
    assert stored["role"] == "admin"


def test_duplicate_uid(client, moderators, moderator_payload):
    assert client.post("/api/moderators", json=moderator_payload).status_code == 201
    r = client.post("/api/moderators", json={**moderator_payload, "displayName": "Other"})
    assert r.status_code == 400
    assert r.json() == {"error": "Moderator with this UID already exists"}
    assert len([d for d in moderators.docs if d["uid"] == "u1"]) == 1


def test_unique_index_catches_racing_insert(fake_db, moderators):
    repo = ModeratorRepo(fake_db, "moderators")

    async def scenario():
        await repo.ensure_indexes()
        await repo.create(uid="u1", display_name="A", email="a@x.com", role="admin")

        # the pre-insert lookup misses, as it would for a concurrent request
        async def miss(*args, **kwargs):
            return None
        moderators.find_one = miss
        await repo.create(uid="u1", display_name="B", email="b@x.com", role="moderator")

    with pytest.raises(DuplicateUidError):
        asyncio.run(scenario())
    assert len(moderators.docs) == 1


def test_list_filters_by_uid(client, moderator_payload):
    client.post("/api/moderators", json=moderator_payload)
    client.post("/api/moderators", json={**moderator_payload, "uid": "u2", "role": "moderator"})

    assert len(client.get("/api/moderators").json()) == 2
    only = client.get("/api/moderators", params={"uid": "u2"}).json()
    assert [m["uid"] for m in only] == ["u2"]
    assert client.get("/api/moderators", params={"uid": "nobody"}).json() == []
    # empty uid behaves like no filter
    assert len(client.get("/api/moderators", params={"uid": ""}).json()) == 2


def test_update(client, moderators, moderator_payload):
    mid = client.post("/api/moderators", json=moderator_payload).json()["moderator"]["_id"]
    r = client.put(f"/api/moderators/{mid}", json={**moderator_payload, "role": "moderator"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Moderator updated successfully"
    assert body["moderator"]["_id"] == mid
    assert body["moderator"]["role"] == "moderator"
    assert moderators.docs[0]["role"] == "moderator"
    assert "updatedAt" in moderators.docs[0]


def test_update_validates_role(client, moderator_payload):
    mid = client.post("/api/moderators", json=moderator_payload).json()["moderator"]["_id"]
    r = client.put(f"/api/moderators/{mid}", json={**moderator_payload, "role": "root"})
    assert r.status_code == 400


def test_update_unknown_and_malformed_id(client, moderators, moderator_payload):
    r = client.put(f"/api/moderators/{ObjectId()}", json=moderator_payload)
    assert r.status_code == 404
    assert r.json() == {"error": "Moderator not found"}
    assert moderators.docs == []

    r = client.put("/api/moderators/123", json=moderator_payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid moderator id"}


def test_update_to_taken_uid_is_rejected(client, moderators, moderator_payload):
    asyncio.run(moderators.create_index("uid", unique=True))
    client.post("/api/moderators", json=moderator_payload)
    mid = client.post("/api/moderators", json={**moderator_payload, "uid": "u2"}).json()["moderator"]["_id"]
    r = client.put(f"/api/moderators/{mid}", json=moderator_payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Moderator with this UID already exists"}


def test_delete_twice(client, moderator_payload):
    mid = client.post("/api/moderators", json=moderator_payload).json()["moderator"]["_id"]
    assert client.delete(f"/api/moderators/{mid}").json() == {"message": "Moderator deleted successfully"}
    assert client.delete(f"/api/moderators/{mid}").status_code == 404


def test_store_failure(client, moderators, moderator_payload):
    moderators.fail_with = AutoReconnect("connection reset")
    r = client.post("/api/moderators", json=moderator_payload)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to add moderator: connection reset"}
    assert client.get("/api/moderators").json() == {"error": "Failed to fetch moderators"}


def test_list_returns_documents_with_unexpected_types(client, moderators):
    moderators.docs.append({"_id": ObjectId(), "uid": 42, "displayName": ["x"], "role": "admin", "image": None})
    r = client.get("/api/moderators")
    assert r.status_code == 200
    mod = r.json()[0]
    assert mod["uid"] == 42
    assert mod["displayName"] == ["x"]
    assert mod["image"] is None


def test_create_response_omits_absent_image(client, moderator_payload):
    mod = client.post("/api/moderators", json=moderator_payload).json()["moderator"]
    assert "image" not in mod
    assert "updatedAt" not in mod
