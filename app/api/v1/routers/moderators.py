# app/api/v1/routers/moderators.py

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from typing import Optional

from app.api.deps import moderator_repo
from app.api.v1.schemas.moderator import ModeratorIn
from app.domain.models.ids import parse_object_id
from app.domain.repositories.moderator_repo import DuplicateUidError, ModeratorRepo

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moderators", tags=["moderators"])

MISSING_FIELDS = "UID, displayName, email, and role are required"
INVALID_ROLE = 'Role must be either "admin" or "moderator"'
DUPLICATE_UID = "Moderator with this UID already exists"

def _validated(body: Optional[ModeratorIn]) -> ModeratorIn:
    body = body or ModeratorIn()
    if not body.is_complete():
        raise HTTPException(status_code=400, detail=MISSING_FIELDS)
    if not body.has_valid_role():
        raise HTTPException(status_code=400, detail=INVALID_ROLE)
    return body

def _object_id(moderator_id: str):
    oid = parse_object_id(moderator_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid moderator id")
    return oid

@router.post("", status_code=201, summary="Add a moderator")
async def create_moderator(body: Optional[ModeratorIn] = None, repo: ModeratorRepo = Depends(moderator_repo)):
    body = _validated(body)
    try:
        moderator = await repo.create(
            uid=body.uid,
            display_name=body.display_name,
            email=body.email,
            role=body.role,
            image=body.image,
        )
    except DuplicateUidError:
        raise HTTPException(status_code=400, detail=DUPLICATE_UID)
    except PyMongoError as e:
        logger.exception("Error adding moderator uid=%s", body.uid)
        raise HTTPException(status_code=500, detail=f"Failed to add moderator: {e}")
    logger.info("Moderator created id=%s uid=%s role=%s", moderator.id, moderator.uid, moderator.role)
    return {"message": "Moderator added successfully", "moderator": moderator.to_public()}

@router.get("", summary="List moderators, optionally filtered by uid")
async def list_moderators(
    uid: Optional[str] = Query(None, description="Only return the moderator with this uid"),
    repo: ModeratorRepo = Depends(moderator_repo),
):
    try:
        moderators = await repo.list_all(uid=uid)
    except (PyMongoError, ValidationError):
        logger.exception("Error fetching moderators")
        raise HTTPException(status_code=500, detail="Failed to fetch moderators")
    return [m.to_public() for m in moderators]

@router.put("/{moderator_id}", summary="Replace a moderator")
async def update_moderator(
    moderator_id: str,
    body: Optional[ModeratorIn] = None,
    repo: ModeratorRepo = Depends(moderator_repo),
):
    body = _validated(body)
    oid = _object_id(moderator_id)
    try:
        moderator = await repo.update(
            oid,
            uid=body.uid,
            display_name=body.display_name,
            email=body.email,
            role=body.role,
            image=body.image,
        )
    except DuplicateUidError:
        raise HTTPException(status_code=400, detail=DUPLICATE_UID)
    except PyMongoError as e:
        logger.exception("Error updating moderator id=%s", moderator_id)
        raise HTTPException(status_code=500, detail=f"Failed to update moderator: {e}")
    if moderator is None:
        raise HTTPException(status_code=404, detail="Moderator not found")
    logger.info("Moderator updated id=%s", moderator_id)
    return {"message": "Moderator updated successfully", "moderator": moderator.to_public()}

@router.delete("/{moderator_id}", summary="Delete a moderator")
async def delete_moderator(moderator_id: str, repo: ModeratorRepo = Depends(moderator_repo)):
    oid = _object_id(moderator_id)
    try:
        deleted = await repo.delete(oid)
    except PyMongoError as e:
        logger.exception("Error deleting moderator id=%s", moderator_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete moderator: {e}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Moderator not found")
    logger.info("Moderator deleted id=%s", moderator_id)
    return {"message": "Moderator deleted successfully"}
