"""Security utilities: author session tokens and secret generation."""

import secrets
from datetime import datetime, timedelta, timezone

import jwt

from partyhub.config import settings


# --- Session Tokens ---

def create_session_token(author_id: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_days)
    payload = {
        "sub": author_id,
        "exp": expire,
        "type": "session",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def session_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.session_days)


# --- Author Secret ---

def generate_author_secret() -> str:
    return secrets.token_urlsafe(24)
