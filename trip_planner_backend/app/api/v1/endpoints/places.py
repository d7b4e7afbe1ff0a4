"""
Place and Category API Endpoints.

Read-only access for authenticated users. Places are maintained by
administrators through the back office.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.config import settings
from trip_planner_backend.app.core.dependencies import get_current_user, get_reference_point
from trip_planner_backend.app.db.session import get_db
from trip_planner_backend.app.schemas.place import (
    CategoryResponse,
    NearbyPlace,
    NearbyPlacesResponse,
    PlaceListResponse,
    PlaceResponse,
)
from trip_planner_backend.app.services import place_store
from trip_planner_backend.app.services.geo import GeoPoint

router = APIRouter(prefix="/app", tags=["Places"])


@router.get("/places", response_model=PlaceListResponse)
async def list_places(
    keyword: Optional[str] = Query(None, max_length=255),
    category_id: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List places, optionally filtered by keyword and category."""
    places, total = await place_store.list_places(db, keyword, category_id, page, page_size)
    memberships = await place_store.categories_for_places(db, [place.id for place in places])

    return PlaceListResponse(
        places=[place_store.to_place_response(place, memberships.get(place.id)) for place in places],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/places/nearby", response_model=NearbyPlacesResponse)
async def list_nearby_places(
    radius_km: float = Query(settings.nearby_default_radius_km, gt=0, le=1000),
    limit: int = Query(20, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    reference: GeoPoint = Depends(get_reference_point),
    db: AsyncSession = Depends(get_db)
):
    """Places within ``radius_km`` of (latitude, longitude), nearest first."""
    matches = await place_store.find_nearby_places(db, reference, radius_km, limit)
    memberships = await place_store.categories_for_places(db, [place.id for place, _ in matches])

    return NearbyPlacesResponse(
        latitude=reference.latitude,
        longitude=reference.longitude,
        radius_km=radius_km,
        places=[
            NearbyPlace(
                place=place_store.to_place_response(place, memberships.get(place.id)),
                distance=distance
            )
            for place, distance in matches
        ]
    )


@router.get("/places/{place_id}", response_model=PlaceResponse)
async def get_place(
    place_id: int = Path(..., description="Place ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get place details."""
    place = await place_store.resolve_place(db, place_id)
    memberships = await place_store.categories_for_places(db, [place.id])
    return place_store.to_place_response(place, memberships.get(place.id))


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List all categories."""
    return await place_store.list_categories(db)
