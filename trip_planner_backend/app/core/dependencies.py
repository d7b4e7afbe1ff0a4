"""
Request dependencies for FastAPI.

Authentication of the caller and extraction of the reference point used by
itinerary reads.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from trip_planner_backend.app.core.jwt import decode_access_token
from trip_planner_backend.app.core.exceptions import MissingReferenceLocationError
from trip_planner_backend.app.services.geo import GeoPoint

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    The token is trusted once its signature and expiry check out; the
    account itself is managed by the authentication service.

    Returns:
        Decoded token payload containing at least ``user_id``

    Raises:
        HTTPException: 401 if the token is missing, invalid or has no user_id
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id < 1:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.owner_id = user_id
    return payload


async def get_current_owner_id(current_user: dict = Depends(get_current_user)) -> int:
    """Owner ID of the authenticated caller."""
    return current_user["user_id"]


async def get_reference_point(
    latitude: Optional[float] = Query(None, ge=-90, le=90, description="Caller latitude"),
    longitude: Optional[float] = Query(None, ge=-180, le=180, description="Caller longitude"),
) -> GeoPoint:
    """
    Reference coordinate for distance annotation.

    Both query parameters are required; a read without them is rejected
    before any trip is loaded.
    """
    if latitude is None or longitude is None:
        raise MissingReferenceLocationError()
    return GeoPoint(latitude=latitude, longitude=longitude)
