# app/db/mongo.py
from __future__ import annotations

import logging

import certifi
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.core.config import Settings

logger = logging.getLogger(__name__)


class MongoStore:
    """
    Process-wide Mongo handle: one Motor client, opened in the app lifespan
    and closed at shutdown. Handlers reach it through `app.api.deps.mongo_db`.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None

    @property
    def client(self) -> AsyncIOMotorClient:
        assert self._client is not None, "Mongo client not initialized"
        return self._client

    @property
    def db(self) -> AsyncIOMotorDatabase:
        assert self._db is not None, "Mongo DB not initialized"
        return self._db

    def _new_client(self, uri: str) -> AsyncIOMotorClient:
        s = self.settings
        kwargs = dict(
            uuidRepresentation="standard",
            serverSelectionTimeoutMS=s.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            connectTimeoutMS=s.MONGO_CONNECT_TIMEOUT_MS,
            socketTimeoutMS=s.MONGO_SOCKET_TIMEOUT_MS,
        )
        if uri.startswith("mongodb+srv://"):
            # SRV implies TLS; containers often lack a usable system CA bundle
            kwargs["tlsCAFile"] = certifi.where()
        return AsyncIOMotorClient(uri, **kwargs)

    async def connect(self) -> None:
        """
        Create the client and ping the server.

        Motor connects lazily, so a failed ping leaves a usable client behind:
        the first real query will try again. With MONGO_REQUIRED the failure
        is re-raised and startup aborts.
        """
        uri = self.settings.mongo_uri
        if not uri:
            raise RuntimeError("No Mongo connection configured (set MONGO_URI or DB_USER/DB_PASS)")

        self._client = self._new_client(uri)
        self._db = self._client[self.settings.MONGO_DB]
        try:
            await self._client.admin.command("ping")
            logger.info("Mongo connected (ping ok) db=%s", self.settings.MONGO_DB)
        except Exception as e:
            if self.settings.MONGO_REQUIRED:
                logger.error("Mongo ping at startup failed: %s", e)
                raise
            logger.error("Mongo ping at startup failed, continuing with lazy connection: %s", e)

    async def ping(self) -> None:
        await self.db.command("ping")

    async def disconnect(self) -> None:
        if self._client:
            self._client.close()
            logger.info("Mongo disconnected")
        self._client = None
        self._db = None
