"""
Authentication utilities: session JWT verification and issuing
"""

import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from config import settings

# JWT configuration
ALGORITHM = "HS256"
TOKEN_TTL = timedelta(days=7)


def create_jwt(user_id: str, ttl: timedelta = TOKEN_TTL) -> str:
    """
    Create a session token for a user.

    In production sessions are minted by the identity provider with the same
    shared secret; this is used by local tooling and tests.
    """
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot create JWT token.")

    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + ttl
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_jwt(token: str) -> Optional[dict]:
    """Decode a JWT token. Returns None if invalid."""
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot decode JWT token.")

    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def create_expired_jwt(user_id: str, expired_seconds_ago: int = 1) -> str:
    """
    Create an expired JWT token for testing purposes.

    Args:
        user_id: User ID to include in token
        expired_seconds_ago: How many seconds ago the token should have expired (default: 1)

    Returns:
        Expired JWT token string

    Raises:
        ValueError: If JWT_SECRET_KEY is not set
    """
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot create JWT token.")

    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) - timedelta(seconds=expired_seconds_ago)
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)
