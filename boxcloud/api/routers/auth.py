"""
FastAPI Router — Auth
=====================

- POST /auth/register : create an account (license-gated), returns a token
- POST /auth/login    : exchange e-mail and password for a token
- GET  /auth/me       : the authenticated user
- POST /auth/logout   : stateless; the client discards its token

Tokens are returned in the response body and sent back by clients as
`Authorization: Bearer <token>`.
"""

from fastapi import APIRouter, Depends, status

from boxcloud.api.dependencies import get_current_user
from boxcloud.api.models import AuthenticatedUser, LoginRequest, RegisterRequest
from boxcloud.api.utils import issue_token
from boxcloud.database.core.funcs import login_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])
"""Creates the FastAPI router in which we define its routes"""


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest):
    """Register a new user account.

    Response:
        201: {'id', 'name', 'email', 'token'}
        400: missing fields, short password, invalid/exhausted/reused license
        409: e-mail already registered
    """
    user = register_user(
        name=data.name,
        email=data.email,
        password=data.password,
        license_code=data.license_code,
    )
    return {**user, "token": issue_token(user["id"])}


@router.post("/login")
def login(data: LoginRequest):
    """Authenticate a user and return a signed JWT.

    Response:
        200: {'id', 'name', 'email', 'token'}
        401: invalid credentials
    """
    user = login_user(email=data.email, password=data.password)
    return {**user, "token": issue_token(user["id"])}


@router.get("/me")
def me(user: AuthenticatedUser = Depends(get_current_user)):
    return user.model_dump()


@router.post("/logout")
def logout(user: AuthenticatedUser = Depends(get_current_user)):
    return {"message": "Logged out successfully"}
