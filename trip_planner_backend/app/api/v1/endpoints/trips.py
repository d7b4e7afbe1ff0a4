"""
Trip API Endpoints.

Authenticated users create, read, replace and delete their own trips.
Reads require the caller's current position (latitude/longitude query
parameters) to annotate each stop with its distance.
"""

from fastapi import APIRouter, Depends, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.config import settings
from trip_planner_backend.app.core.dependencies import get_current_owner_id, get_reference_point
from trip_planner_backend.app.db.session import get_db
from trip_planner_backend.app.schemas.trip import (
    TripCreate,
    TripDeleteResponse,
    TripListResponse,
    TripResponse,
    TripUpdate,
)
from trip_planner_backend.app.services.geo import GeoPoint
from trip_planner_backend.app.services.itinerary import enrich_trip, enrich_trips
from trip_planner_backend.app.services import trip_builder, trip_loader

router = APIRouter(prefix="/app/trips", tags=["Trips"])


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a trip owned by the caller.

    Validates:
    - from_date is not after to_date
    - At least one day, each with at least one stop
    - Every stop references an existing place

    The trip and all its days are written in one transaction.
    """
    return await trip_builder.create_trip(db, owner_id, trip_data)


@router.get("", response_model=TripListResponse)
async def list_trips(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=settings.trips_page_size_max),
    owner_id: int = Depends(get_current_owner_id),
    reference: GeoPoint = Depends(get_reference_point),
    db: AsyncSession = Depends(get_db)
):
    """
    List the caller's trips, most recently updated first.

    Every stop carries its distance from (latitude, longitude) and every
    trip its total fee.
    """
    trips, total = await trip_loader.list_trips(db, owner_id, page, page_size)

    return TripListResponse(
        trips=enrich_trips(trips, reference),
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    owner_id: int = Depends(get_current_owner_id),
    reference: GeoPoint = Depends(get_reference_point),
    db: AsyncSession = Depends(get_db)
):
    """Get one of the caller's trips with distances and fee."""
    trip = await trip_loader.get_trip(db, trip_id, owner_id)
    return enrich_trip(trip, reference)


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_data: TripUpdate,
    trip_id: int = Path(..., description="Trip ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Replace one of the caller's trips.

    Scalar fields are overwritten and the whole day list is replaced.
    Send the ``version`` from the last read to reject concurrent edits.
    """
    return await trip_builder.update_trip(db, trip_id, owner_id, trip_data)


@router.delete("/{trip_id}", response_model=TripDeleteResponse)
async def delete_trip(
    trip_id: int = Path(..., description="Trip ID"),
    owner_id: int = Depends(get_current_owner_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete one of the caller's trips together with its days."""
    await trip_builder.delete_trip(db, trip_id, owner_id)
    return TripDeleteResponse(trip_id=trip_id)
