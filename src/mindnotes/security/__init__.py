"""Security utilities."""

from .google_oauth import GoogleOAuthClient, GoogleToken
from .jwt import (
    JWTTokenVerifier,
    TokenVerifier,
    create_access_token,
    decode_access_token,
    get_token_verifier,
    get_user_id_from_token,
)

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_user_id_from_token",
    "TokenVerifier",
    "JWTTokenVerifier",
    "get_token_verifier",
    "GoogleOAuthClient",
    "GoogleToken",
]
