"""
Auth feature: API routes.
"""

from fastapi import APIRouter, Depends, status
from supabase import Client

from notes_app.core.dependencies import get_db, get_current_user_id
from notes_app.core.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    UsernameTakenError,
    app_error_to_http,
)
from notes_app.features.auth.schemas import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    UserResponse,
)
from notes_app.features.auth.service import AuthService

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, db: Client = Depends(get_db)):
    """Create a new account."""
    service = AuthService(db)
    try:
        return await service.register(data)
    except UsernameTakenError as e:
        raise app_error_to_http(e, status.HTTP_400_BAD_REQUEST)


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, db: Client = Depends(get_db)):
    """Sign in and receive a JWT token."""
    service = AuthService(db)
    try:
        return await service.login(data)
    except InvalidCredentialsError as e:
        raise app_error_to_http(e, status.HTTP_401_UNAUTHORIZED)


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Current user's profile."""
    service = AuthService(db)
    try:
        return await service.get_profile(user_id)
    except InvalidTokenError as e:
        raise app_error_to_http(e, status.HTTP_401_UNAUTHORIZED)


@router.post("/refresh", response_model=LoginResponse)
async def refresh_token(
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Renew the JWT token. Call when the token is about to expire.

    Requires: valid Bearer token in Authorization header.
    Returns: new access_token with fresh expiry.
    """
    service = AuthService(db)
    try:
        return await service.refresh(user_id)
    except InvalidTokenError as e:
        raise app_error_to_http(e, status.HTTP_401_UNAUTHORIZED)
