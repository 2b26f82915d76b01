"""
Session tokens issued by the external auth provider.

The provider signs HS256 JWTs with the shared `JWT_SECRET`; the subject
claim carries the user id. Nothing here stores users.
"""
from datetime import datetime, timedelta, timezone

import jwt

from config import settings

_ALGO = "HS256"


class InvalidTokenError(Exception):
    """Token missing, expired, badly signed or without a subject."""


def create_token(user_id: str, ttl_minutes: int = 60) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=ttl_minutes)
    payload = {"sub": user_id, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGO)


def verify_token(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGO])
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    sub = payload.get("sub")
    if not sub:
        raise InvalidTokenError("token has no subject")
    return sub
