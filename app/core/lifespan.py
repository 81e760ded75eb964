# app/core/lifespan.py
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from pymongo.errors import PyMongoError
from app.db.mongo import MongoStore
from app.core.config import get_settings
from app.core.security import build_token_verifier
from app.domain.repositories.moderator_repo import ModeratorRepo

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    app.state.token_verifier = build_token_verifier(settings)

    store = MongoStore(settings)
    await store.connect()   # raises only when MONGO_REQUIRED (or nothing is configured)
    app.state.mongo = store

    # One moderator per uid, enforced by the store as well as by the pre-insert lookup
    try:
        await ModeratorRepo(store.db, settings.MODERATOR_COLLECTION).ensure_indexes()
        logger.info("Index moderators.uid (unique) ready")
    except PyMongoError as e:
        logger.error("Could not ensure unique index on moderators.uid: %s", e)

    # Application runs
    yield

    # --- Shutdown ---
    await store.disconnect()
