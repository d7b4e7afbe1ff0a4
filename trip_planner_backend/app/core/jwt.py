"""
JWT token utilities for authentication.

Tokens are minted by the account service; this backend only verifies them
and reads the trip owner from the ``user_id`` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from trip_planner_backend.app.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode (should include: sub, user_id)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "alice",
            "user_id": 42,
            "exp": 1700001800
        }
    """
    claims = data.copy()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims["exp"] = datetime.now(timezone.utc) + lifetime
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Returns the claims if signature and expiry are valid, None otherwise.
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
