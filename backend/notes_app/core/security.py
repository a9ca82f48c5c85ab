"""
Account credentials: bcrypt password hashes and the bearer tokens
the notes routes accept.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from notes_app.config import get_settings

# ── Passwords ────────────────────────────────────────────
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    if not password_hash or pwd_context.identify(password_hash) is None:
        return False
    return pwd_context.verify(password, password_hash)


# ── Tokens ───────────────────────────────────────────────
def create_access_token(user_id: int | str, extra_data: dict | None = None) -> str:
    """Sign a token whose `sub` is the user id; expires after JWT_EXPIRY_MINUTES."""
    settings = get_settings()
    issued = datetime.now(timezone.utc)
    claims = {
        **(extra_data or {}),
        "sub": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.JWT_EXPIRY_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Claims of a valid token that names a user, else None."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    return claims if claims.get("sub") else None
