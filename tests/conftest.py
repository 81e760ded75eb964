import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from app.api.deps import mongo_db, token_verifier
from app.core.security import UnverifiedTokenVerifier
from app.main import create_app


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(k) == v for k, v in query.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """In-memory stand-in for the subset of AsyncIOMotorCollection the repos use."""

    def __init__(self):
        self.docs: list[dict] = []
        self.unique_keys: set[str] = set()
        self.fail_with: Exception | None = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _violates_unique(self, doc: dict, exclude_id=None) -> bool:
        for key in self.unique_keys:
            for other in self.docs:
                if other["_id"] != exclude_id and key in doc and other.get(key) == doc[key]:
                    return True
        return False

    async def create_index(self, key, unique=False, name=None):
        self._check()
        if unique:
            self.unique_keys.add(key)
        return name or f"{key}_1"

    async def insert_one(self, doc):
        self._check()
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        if self._violates_unique(stored):
            raise DuplicateKeyError("E11000 duplicate key error")
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    def find(self, query=None):
        self._check()
        return FakeCursor([copy.deepcopy(d) for d in self.docs if _matches(d, query or {})])

    async def find_one(self, query, projection=None):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                return copy.deepcopy(d)
        return None

    async def update_one(self, query, update, upsert=False):
        self._check()
        for d in self.docs:
            if _matches(d, query):
                candidate = {**d, **update["$set"]}
                if self._violates_unique(candidate, exclude_id=d["_id"]):
                    raise DuplicateKeyError("E11000 duplicate key error")
                d.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        self._check()
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}
        self.ping_error: Exception | None = None

    def __getitem__(self, name) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def command(self, cmd):
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


class FakeStore:
    def __init__(self, db: FakeDatabase):
        self.db = db

    async def ping(self):
        await self.db.command("ping")


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def products(fake_db):
    return fake_db["product"]


@pytest.fixture
def moderators(fake_db):
    return fake_db["moderators"]


@pytest.fixture
def verifier():
    return UnverifiedTokenVerifier()


@pytest.fixture
def app(fake_db, verifier):
    app = create_app(with_lifespan=False)
    app.dependency_overrides[mongo_db] = lambda: fake_db
    app.dependency_overrides[token_verifier] = lambda: verifier
    app.state.mongo = FakeStore(fake_db)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def moderator_payload():
    return {"uid": "u1", "displayName": "D", "email": "e@x.com", "role": "admin"}


class FakeAdmin:
    def __init__(self, ping_error=None):
        self.ping_error = ping_error

    async def command(self, cmd):
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


class FakeMotorClient:
    """Replaces AsyncIOMotorClient inside MongoStore; every database name maps to one FakeDatabase."""

    def __init__(self, db: FakeDatabase, ping_error=None):
        self.admin = FakeAdmin(ping_error)
        self._db = db
        self.closed = False

    def __getitem__(self, name) -> FakeDatabase:
        return self._db

    def close(self):
        self.closed = True


@pytest.fixture
def motor_client(monkeypatch, fake_db):
    """Route MongoStore's client construction to a FakeMotorClient; returns the client it will hand out."""
    from app.db.mongo import MongoStore

    client = FakeMotorClient(fake_db)
    monkeypatch.setattr(MongoStore, "_new_client", lambda self, uri: client)
    return client


@pytest.fixture
def settings():
    from app.core.config import Settings

    return Settings(_env_file=None, MONGO_URI="mongodb://db.test:27017", MONGO_DB="apparelsDB")
