"""
FastAPI dependencies for authentication.

A request may carry ``Authorization: Bearer <jwt>``. A valid token yields the
payload ``{"username", "isAdmin"}``; a missing or invalid one is treated as an
anonymous request, and the ``ensure_*`` guards decide whether that is allowed.
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends, Header

from .errors import UnauthorizedError
from .utils.tokens import decode_token

logger = logging.getLogger(__name__)


def get_current_user(authorization: Optional[str] = Header(None)) -> Optional[dict]:
    """Extract the user payload from the JWT. Returns None if no usable auth."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization.split(" ", 1)[1].strip()
    try:
        return decode_token(token)
    except jwt.InvalidTokenError as exc:
        logger.debug("Ignoring invalid token: %s", exc)
        return None


def ensure_logged_in(user: Optional[dict] = Depends(get_current_user)) -> dict:
    """Raises UnauthorizedError unless a valid token was sent."""
    if not user:
        raise UnauthorizedError()
    return user


def ensure_admin(user: dict = Depends(ensure_logged_in)) -> dict:
    """Logged in as an admin; anonymous requests fail in ensure_logged_in first."""
    if not user.get("isAdmin"):
        raise UnauthorizedError("Must be admin to access")
    return user


def ensure_correct_user_or_admin(username: str, user: dict = Depends(ensure_logged_in)) -> dict:
    """Allow the user named in the route path, or any admin."""
    if not (user.get("isAdmin") or user.get("username") == username):
        raise UnauthorizedError()
    return user
