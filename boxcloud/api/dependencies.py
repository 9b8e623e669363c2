"""
Access-control gate (FastAPI dependencies).

`get_current_user` protects owner routes: it reads `Authorization: Bearer
<token>`, verifies the token and re-reads the user row on every request, so a
deleted account loses access immediately even while its token is unexpired.

`get_optional_user` is for public routes that adapt to a signed-in viewer; it
never fails the request.
"""

import logging

from fastapi import Request

from boxcloud.api.errors import Forbidden, Unauthorized
from boxcloud.api.models import AuthenticatedUser
from boxcloud.api.utils import InvalidToken, verify_token
from boxcloud.database.core.funcs import get_user_by_id

logger = logging.getLogger(__name__)


def extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(request: Request) -> AuthenticatedUser:
    """
    Resolve the caller or reject the request.

    Raises
    ------
    Unauthorized
        No bearer token was sent (401).
    Forbidden
        The token is invalid/expired or its user no longer exists (403).
    """
    token = extract_bearer_token(request)
    if token is None:
        raise Unauthorized("No token provided")
    try:
        user_id = verify_token(token)
    except InvalidToken as e:
        logger.debug(f"Rejected token: {e}")
        raise Forbidden("Invalid or expired token")

    details = get_user_by_id(user_id=user_id)
    if details is None:
        raise Forbidden("Invalid or expired token")

    user = AuthenticatedUser(**details)
    request.state.user = user
    return user


def get_optional_user(request: Request) -> AuthenticatedUser | None:
    """Caller if a valid token was sent, otherwise None."""
    token = extract_bearer_token(request)
    if token is None:
        return None
    try:
        user_id = verify_token(token)
    except InvalidToken:
        return None
    details = get_user_by_id(user_id=user_id)
    if details is None:
        return None
    user = AuthenticatedUser(**details)
    request.state.user = user
    return user
