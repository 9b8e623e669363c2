"""
JWT utilities for issuing and verifying access tokens.

Functions
---------
create_access_token(data: dict) -> str
    Creates a signed JWT access token with an expiration (`exp`) claim.
issue_token(user_id: str) -> str
    Access token whose subject is the given user id.
verify_token(token: str) -> str
    Verify a JWT's signature & expiration and return the user id, or raise
    `InvalidToken`.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Token lifetime window in minutes (7 days by default).
"""

from datetime import datetime, timezone

from jose import jwt, JWTError
from boxcloud.database.config.config import settings


class InvalidToken(Exception):
    """Raised when a token is malformed, badly signed, expired or has no subject."""


def create_access_token(data: dict, expires_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token.

    Parameters
    ----------
    data : dict
        Claims to embed in the token.
    expires_minutes : int, optional
        Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns
    -------
    str
        Encoded JWT string.
    """
    expiration_time = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    encoding = data.copy()
    # exp is a NumericDate (seconds since epoch)
    expires = int(datetime.now(timezone.utc).timestamp()) + (int(expiration_time) * 60)
    encoding.update({"exp": expires})
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_token(user_id: str) -> str:
    return create_access_token({"sub": user_id, "userId": user_id})


def verify_token(token: str) -> str:
    """
    Verify a JWT and return the user id it was issued for.

    Raises
    ------
    InvalidToken
        On any JWTError (invalid signature, expired, malformed) or when the
        token carries no subject.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise InvalidToken(str(e)) from e
    user_id = payload.get("sub") or payload.get("userId")
    if not user_id:
        raise InvalidToken("Token has no subject")
    return str(user_id)
