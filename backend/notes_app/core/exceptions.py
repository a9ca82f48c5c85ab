"""
Custom exception classes for unified error handling.
"""

from fastapi import HTTPException, status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NoteNotFoundError(AppBaseError):
    """Raised when a note (or trashed note) does not exist or is not owned by the user."""
    def __init__(self, note_id: int | str, trashed: bool = False):
        kind = "Trashed note" if trashed else "Note"
        super().__init__(
            message=f"{kind} not found or not owned by user",
            detail=f"id={note_id}",
        )


class UsernameTakenError(AppBaseError):
    """Raised when registering a username that already exists."""
    def __init__(self, username: str):
        super().__init__(
            message="Username already exists",
            detail=f"'{username}' is taken, pick another username.",
        )


class InvalidCredentialsError(AppBaseError):
    """Raised on login with an unknown username or a wrong password."""
    def __init__(self):
        super().__init__(message="Invalid username or password")


class InvalidTokenError(AppBaseError):
    """Raised when a JWT token no longer maps to an existing user."""
    def __init__(self):
        super().__init__(
            message="Invalid or expired token",
            detail="Please sign in again.",
        )


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int = 400) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
        },
        headers=headers,
    )
