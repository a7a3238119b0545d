"""JWT token utilities and the token verifier used to resolve the caller."""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import Settings, get_settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token. ``data["sub"]`` must be the user id."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[Dict[str, Any]]:
    """Decode and validate an access token; None when invalid or expired."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    if payload.get("type") != "access":
        return None
    return payload


def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract user ID from token."""
    payload = decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        return UUID(user_id)
    except ValueError:
        return None


class TokenVerifier(ABC):
    """Turns a bearer token into a verified owner id."""

    @abstractmethod
    def verify(self, token: str) -> Optional[UUID]:
        """Return the owner id, or None when the token is not acceptable."""


class JWTTokenVerifier(TokenVerifier):
    """Verifies HS256 access tokens signed with the app secret."""

    def verify(self, token: str) -> Optional[UUID]:
        return get_user_id_from_token(token)


_default_verifier = JWTTokenVerifier()


def get_token_verifier() -> TokenVerifier:
    """FastAPI dependency; override it to plug another identity provider."""
    return _default_verifier
