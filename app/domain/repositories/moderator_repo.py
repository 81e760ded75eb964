# app/domain/repositories/moderator_repo.py

from __future__ import annotations
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging
from bson import ObjectId
from pymongo.errors import DuplicateKeyError
from motor.motor_asyncio import AsyncIOMotorDatabase
from app.domain.models.moderator import Moderator

logger = logging.getLogger(__name__)

def _echo(doc: Dict[str, Any]) -> Moderator:
    # response built from what was written; an absent image is left out rather than sent as null
    return Moderator.model_validate({k: v for k, v in doc.items() if v is not None})

class DuplicateUidError(Exception):
    """A moderator with this uid is already stored."""

    def __init__(self, uid: str):
        super().__init__(f"Moderator with uid={uid!r} already exists")
        self.uid = uid

class ModeratorRepo:
    """
    Moderator repository backed by the 'moderators' collection.

    One document per `uid`: `create` checks for an existing document first, and
    `ensure_indexes` installs a unique index on `uid` so two racing inserts cannot
    both land. Either path surfaces as DuplicateUidError.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "moderators"):
        self.col = db[collection_name]

    async def ensure_indexes(self) -> None:
        await self.col.create_index("uid", unique=True, name="uid_unique")

    async def get_by_uid(self, uid: str) -> Optional[Moderator]:
        doc = await self.col.find_one({"uid": uid})
        return Moderator.model_validate(doc) if doc else None

    async def list_all(self, uid: Optional[str] = None) -> List[Moderator]:
        query: Dict[str, Any] = {"uid": uid} if uid else {}
        docs = await self.col.find(query).to_list(length=None)
        return [Moderator.model_validate(d) for d in docs]

    async def create(
        self,
        *,
        uid: str,
        display_name: str,
        email: str,
        role: str,
        image: Optional[str] = None,
    ) -> Moderator:
        if await self.col.find_one({"uid": uid}, {"_id": 1}):
            raise DuplicateUidError(uid)

        doc = {
            "uid": uid,
            "displayName": display_name,
            "email": email,
            "role": role,
            "image": image,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError as e:
            # lost the race against a concurrent insert; the unique index caught it
            logger.warning("moderator insert rejected by unique index uid=%s", uid)
            raise DuplicateUidError(uid) from e
        return _echo({"_id": res.inserted_id, **doc})

    async def update(
        self,
        oid: ObjectId,
        *,
        uid: str,
        display_name: str,
        email: str,
        role: str,
        image: Optional[str] = None,
    ) -> Optional[Moderator]:
        fields = {
            "uid": uid,
            "displayName": display_name,
            "email": email,
            "role": role,
            "image": image,
            "updatedAt": datetime.now(timezone.utc),
        }
        try:
            res = await self.col.update_one({"_id": oid}, {"$set": fields}, upsert=False)
        except DuplicateKeyError as e:
            raise DuplicateUidError(uid) from e
        if res.matched_count == 0:
            return None
        return _echo({"_id": oid, **fields})

    async def delete(self, oid: ObjectId) -> bool:
        res = await self.col.delete_one({"_id": oid})
        return res.deleted_count > 0
