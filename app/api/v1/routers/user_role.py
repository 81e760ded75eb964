from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from app.api.deps import moderator_repo, token_verifier
from app.api.v1.schemas.moderator import RoleOut
from app.core.security import TokenVerifier, bearer_token
from app.domain.repositories.moderator_repo import ModeratorRepo

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])

@router.get("/role", response_model=RoleOut, response_model_exclude_unset=True)
async def get_user_role(
    uid: Optional[str] = Query(None, description="Identity-provider uid of the caller"),
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifier = Depends(token_verifier),
    repo: ModeratorRepo = Depends(moderator_repo),
):
    """
    Resolve a uid to its moderator role.
    When the verifier vouches for a subject, the query uid must match it.
    """
    token = bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")
    if not uid:
        raise HTTPException(status_code=400, detail="UID is required")

    claims = await verifier.verify(token)
    if claims is None:
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token")
    if claims.uid is not None and claims.uid != uid:
        logger.warning("Role lookup uid=%s does not match token subject", uid)
        raise HTTPException(status_code=403, detail="Forbidden: token does not match UID")

    try:
        moderator = await repo.get_by_uid(uid)
    except (PyMongoError, ValidationError):
        logger.exception("Error fetching user role uid=%s", uid)
        raise HTTPException(status_code=500, detail="Failed to fetch user role")
    if moderator is None:
        raise HTTPException(status_code=404, detail="User not found in database")

    logger.info("Response: get_user_role uid=%s role=%s", uid, moderator.role)
    # a document without a role answers {} rather than {"role": null}
    if "role" not in moderator.model_fields_set:
        return RoleOut()
    return RoleOut(role=moderator.role)
