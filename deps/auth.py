import logging
import os
from typing import Annotated

import jwt
from fastapi import Header, HTTPException

from tracking import CurrentUser

logger = logging.getLogger("question-bank.auth")

# Sessions are issued by the external identity provider as HS256 bearer tokens.
JWT_ALGORITHMS = ["HS256"]


def _secret() -> str:
    return os.getenv("IDENTITY_JWT_SECRET", "")


def _decode(token: str, secret: str) -> CurrentUser:
    audience = os.getenv("IDENTITY_JWT_AUDIENCE") or None
    payload = jwt.decode(
        token,
        secret,
        algorithms=JWT_ALGORITHMS,
        audience=audience,
        options={"require": ["sub"], "verify_aud": audience is not None},
    )
    return CurrentUser(id=str(payload["sub"]), email=payload.get("email"))


def _bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser | None:
    """
    The signed-in user, or None for anonymous callers. A bad token is treated
    as anonymous here; protected routes use require_user instead.
    """
    token = _bearer(authorization)
    secret = _secret()
    if not token or not secret:
        return None
    try:
        return _decode(token, secret)
    except jwt.PyJWTError as e:
        logger.debug("Ignoring invalid session token: %s", e)
        return None


def require_user(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Strict guard for per-user routes: 401 unless a valid session token is sent."""
    token = _bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized.")
    secret = _secret()
    if not secret:
        raise HTTPException(status_code=500, detail="IDENTITY_JWT_SECRET not configured on server.")
    try:
        return _decode(token, secret)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Unauthorized.")
