"""
OpenMusic API — Access Token Verification
==========================================

What:  FastAPI dependency that turns `Authorization: Bearer <jwt>` into a user id.
How:   PyJWT verifies the signature and expiry with the shared ACCESS_TOKEN_KEY;
       the user id is read from the `id` claim.
Who:   Attached to every route whose table entry carries auth="openmusic_jwt",
       and declared by handlers that need the caller's id.

Token issuance lives in the identity service; this module never creates tokens.
FastAPI caches a dependency per request, so a route-level auth dependency and
a handler parameter using the same callable verify the token once.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from openmusic.config import settings
from openmusic.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# auto_error=False: a missing header becomes our AuthenticationError (401 body
# in the application error format) instead of FastAPI's bare 403.
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def _log_missing_key() -> None:
    logger.error("ACCESS_TOKEN_KEY is not set; rejecting every access token")


def decode_access_token(token: str) -> Dict:
    """
    Verify an access token and return its payload.

    Without a configured ACCESS_TOKEN_KEY no token is accepted, so a token
    signed with an empty key never authenticates.

    Raises:
        AuthenticationError: no key configured, bad signature, expired,
                             malformed, or no `id` claim
    """
    if not settings.access_token_key:
        _log_missing_key()
        raise AuthenticationError(message="Invalid access token")

    try:
        payload = jwt.decode(
            token,
            settings.access_token_key,
            algorithms=[settings.access_token_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(message="Access token has expired")
    except jwt.PyJWTError as e:
        logger.info("Rejected access token: %s", type(e).__name__)
        raise AuthenticationError(message="Invalid access token")

    if not payload.get("id"):
        raise AuthenticationError(message="Access token does not identify a user")
    return payload


async def require_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the authenticated user id for the current request.

    Returns:
        The `id` claim of a valid access token.

    Raises:
        AuthenticationError: no bearer credentials or token rejected (→ 401)
    """
    if credentials is None:
        raise AuthenticationError(message="Missing authentication")
    payload = decode_access_token(credentials.credentials)
    return payload["id"]


# ── Auth Strategies ───────────────────────────────────────────────────────
# Names usable in route tables' `auth` field.
AUTH_STRATEGIES: Dict[str, Callable] = {
    "openmusic_jwt": require_access_token,
}
