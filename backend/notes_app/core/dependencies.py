"""
FastAPI dependency injection functions.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from notes_app.core.database import get_supabase_client
from notes_app.core.security import decode_access_token

# Bearer token scheme for Swagger UI; auto_error off so a missing header is a 401
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Client:
    """Dependency: get Supabase client."""
    return get_supabase_client()


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Dependency: extract and validate user_id from JWT token.

    Returns:
        str: The user's id as string.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload["sub"]
