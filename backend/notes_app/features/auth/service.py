"""
Auth feature: Business logic for user registration, login, and profile lookup.
"""

import logging
from supabase import Client

from notes_app.core.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    UsernameTakenError,
)
from notes_app.core.security import hash_password, verify_password, create_access_token
from notes_app.features.auth.schemas import RegisterRequest, LoginRequest, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Handles user registration and authentication."""

    def __init__(self, db: Client):
        self.db = db

    def _find_by_username(self, username: str) -> dict | None:
        result = (
            self.db.table("users")
            .select("*")
            .eq("username", username)
            .execute()
        )
        return result.data[0] if result.data else None

    def _find_by_id(self, user_id: str) -> dict | None:
        result = self.db.table("users").select("*").eq("id", user_id).execute()
        return result.data[0] if result.data else None

    async def register(self, data: RegisterRequest) -> dict:
        """Register a new user.

        Returns:
            dict with the new user's id.

        Raises:
            UsernameTakenError: If the username already exists.
        """
        if self._find_by_username(data.username):
            raise UsernameTakenError(data.username)

        result = self.db.table("users").insert({
            "username": data.username,
            "password_hash": hash_password(data.password),
        }).execute()
        user = result.data[0]

        logger.info(f"👤 Registered user {user['id']} ({data.username})")
        return {"id": user["id"], "message": "User registered successfully"}

    async def login(self, data: LoginRequest) -> dict:
        """Authenticate user and return JWT token.

        Raises:
            InvalidCredentialsError: If username or password is wrong.
        """
        user = self._find_by_username(data.username)

        if not user or not verify_password(data.password, user["password_hash"]):
            logger.warning(f"Failed login for '{data.username}'")
            raise InvalidCredentialsError()

        return {
            "access_token": create_access_token(user["id"]),
            "token_type": "bearer",
            "user": UserResponse(**user),
        }

    async def get_profile(self, user_id: str) -> UserResponse:
        """Get user profile by ID.

        Raises:
            InvalidTokenError: If the token's user no longer exists.
        """
        user = self._find_by_id(user_id)
        if not user:
            raise InvalidTokenError()
        return UserResponse(**user)

    async def refresh(self, user_id: str) -> dict:
        """Issue a fresh token for a still-existing user."""
        profile = await self.get_profile(user_id)
        return {
            "access_token": create_access_token(profile.id),
            "token_type": "bearer",
            "user": profile,
        }
