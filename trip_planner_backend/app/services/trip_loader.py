"""
Trip read path.

Loads trips and their days, decodes every day's stop list right after the
fetch and assembles the response models. Distances and fees are added
afterwards by the itinerary pass (services/itinerary.py).
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.exceptions import TripNotFoundError
from trip_planner_backend.app.models.day import Day
from trip_planner_backend.app.models.trip import Trip
from trip_planner_backend.app.schemas.trip import DayResponse, TripResponse
from trip_planner_backend.app.services.day_codec import decode_stops


def from_epoch(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_epoch(value: datetime) -> int:
    # SQLite hands timestamps back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


async def load_owned_trip(db: AsyncSession, trip_id: int, owner: int) -> Trip:
    """
    Fetch a trip scoped by ID and owner.

    Raises:
        TripNotFoundError: trip missing or owned by someone else
    """
    result = await db.execute(
        select(Trip).where(Trip.id == trip_id, Trip.owner == owner)
    )
    trip = result.scalar_one_or_none()
    if trip is None:
        raise TripNotFoundError(trip_id)
    return trip


def decode_day(day: Day) -> DayResponse:
    return DayResponse(
        id=day.id,
        trip_id=day.trip_id,
        position=day.position,
        places=decode_stops(day.places, day_id=day.id),
    )


async def fetch_days(db: AsyncSession, trip_ids: Iterable[int]) -> Dict[int, List[DayResponse]]:
    """
    Load and decode the days of the given trips, keyed by trip ID.

    Raises:
        StopDecodeError: a stored stop list is malformed
    """
    ids = set(trip_ids)
    if not ids:
        return {}

    result = await db.execute(
        select(Day)
        .where(Day.trip_id.in_(ids))
        .order_by(Day.trip_id, Day.position, Day.id)
    )

    days_by_trip: Dict[int, List[DayResponse]] = {trip_id: [] for trip_id in ids}
    for day in result.scalars().all():
        days_by_trip[day.trip_id].append(decode_day(day))
    return days_by_trip


def build_trip_response(trip: Trip, days: List[DayResponse]) -> TripResponse:
    return TripResponse(
        id=trip.id,
        owner=trip.owner,
        name=trip.name,
        from_date=to_epoch(trip.from_date),
        to_date=to_epoch(trip.to_date),
        users=trip.users,
        version=trip.version,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
        days=days,
    )


async def get_trip(db: AsyncSession, trip_id: int, owner: int) -> TripResponse:
    """Single trip of ``owner`` with decoded days."""
    trip = await load_owned_trip(db, trip_id, owner)
    days_by_trip = await fetch_days(db, [trip.id])
    return build_trip_response(trip, days_by_trip[trip.id])


async def list_trips(
    db: AsyncSession,
    owner: int,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[TripResponse], int]:
    """
    Trips of ``owner``, most recently updated first.

    Returns:
        (trips on the requested page, total trips of the owner)
    """
    total_result = await db.execute(
        select(func.count(Trip.id)).where(Trip.owner == owner)
    )
    total = total_result.scalar()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(Trip)
        .where(Trip.owner == owner)
        .order_by(Trip.updated_at.desc(), Trip.id.desc())
        .offset(offset)
        .limit(page_size)
    )
    trips = result.scalars().all()

    days_by_trip = await fetch_days(db, [trip.id for trip in trips])
    return [build_trip_response(trip, days_by_trip[trip.id]) for trip in trips], total
