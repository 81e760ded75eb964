# app/core/security.py
"""
Bearer-token verification for the role lookup.

Handlers only see the `TokenVerifier` protocol; which implementation runs is
decided once at startup from `AUTH_VERIFIER`:

- ``unverified``: accepts any non-empty token and vouches for no subject.
  It only exists so the endpoint contract can be exercised without an identity
  provider and must not be deployed as real authentication.
- ``firebase``: checks Firebase ID tokens with the Admin SDK
  (``pip install .[firebase]``).
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings

logger = logging.getLogger(__name__)


class TokenClaims(BaseModel):
    # Subject the token was issued for; None when the verifier cannot vouch for one
    uid: Optional[str] = None

    model_config = {"frozen": True}


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> Optional[TokenClaims]:
        """Return the token's claims, or None if the token is not acceptable."""
        ...


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract `<token>` from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer":
        return None
    return token.strip() or None


class UnverifiedTokenVerifier:
    """Presence-only check: every non-empty token passes, no subject is bound."""

    async def verify(self, token: str) -> Optional[TokenClaims]:
        if not token:
            return None
        return TokenClaims()


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens; the token's `uid` becomes the subject."""

    def __init__(self, credentials_path: Optional[str] = None):
        import firebase_admin
        from firebase_admin import auth, credentials

        if not firebase_admin._apps:
            cred = credentials.Certificate(credentials_path) if credentials_path else None
            firebase_admin.initialize_app(cred)
        self._auth = auth

    async def verify(self, token: str) -> Optional[TokenClaims]:
        try:
            # verify_id_token is blocking (fetches and caches Google public keys)
            decoded = await run_in_threadpool(self._auth.verify_id_token, token)
        except (ValueError, self._auth.InvalidIdTokenError, self._auth.ExpiredIdTokenError,
                self._auth.RevokedIdTokenError, self._auth.CertificateFetchError) as e:
            logger.info("rejected id token: %s", e)
            return None
        return TokenClaims(uid=decoded.get("uid"))


def build_token_verifier(settings: Settings) -> TokenVerifier:
    if settings.AUTH_VERIFIER == "firebase":
        logger.info("Token verification: Firebase Admin SDK")
        return FirebaseTokenVerifier(settings.FIREBASE_CREDENTIALS_PATH)
    logger.warning(
        "Token verification: UNVERIFIED (presence-only). "
        "Set AUTH_VERIFIER=firebase before exposing /api/user/role."
    )
    return UnverifiedTokenVerifier()
