"""
Trip aggregate builder.

Validates a submitted trip, resolves and snapshots its places, encodes each
day and writes the trip together with its days in one transaction.

Checks run in this order, each with its own error:
1. from_date after to_date      -> InvalidDateRangeError
2. no day                       -> DaysEmptyError
3. a day without stops          -> PlacesEmptyInDayError (first such day)
4. a stop with an unknown place -> PlaceNotFoundError (first in request order)
Nothing is written unless all of them pass.
"""

import logging
from typing import Dict, List, Sequence

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.exceptions import (
    DaysEmptyError,
    InvalidDateRangeError,
    PlaceNotFoundError,
    PlacesEmptyInDayError,
    TripVersionConflictError,
)
from trip_planner_backend.app.db.transaction import transaction
from trip_planner_backend.app.models.day import Day
from trip_planner_backend.app.models.trip import Trip
from trip_planner_backend.app.schemas.trip import (
    DayCreate,
    DayResponse,
    PlaceSnapshot,
    Stop,
    TripCreate,
    TripResponse,
    TripUpdate,
)
from trip_planner_backend.app.services.day_codec import encode_stops
from trip_planner_backend.app.services.place_store import resolve_places, snapshot_place
from trip_planner_backend.app.services.trip_loader import (
    build_trip_response,
    from_epoch,
    load_owned_trip,
)

logger = logging.getLogger("trip_planner.trips")


def validate_shape(payload: TripCreate) -> None:
    """Checks 1 to 3, which need no storage access."""
    if payload.from_date > payload.to_date:
        raise InvalidDateRangeError(payload.from_date, payload.to_date)

    if not payload.days:
        raise DaysEmptyError()

    for index, day in enumerate(payload.days):
        if not day.places:
            raise PlacesEmptyInDayError(index)


def build_stops(day: DayCreate, snapshots: Dict[int, PlaceSnapshot]) -> List[Stop]:
    return [
        Stop(
            place_id=stop.place_id,
            note=stop.note,
            visit_time=stop.visit_time,
            start_time=stop.start_time,
            vehicle=stop.vehicle,
            place=snapshots[stop.place_id],
        )
        for stop in day.places
    ]


async def compose_days(db: AsyncSession, days: Sequence[DayCreate]) -> List[List[Stop]]:
    """
    Resolve every referenced place and build the stop lists of all days.

    Each distinct place is fetched once.

    Raises:
        PlaceNotFoundError: the first stop whose place does not exist
    """
    place_ids = [stop.place_id for day in days for stop in day.places]
    places = await resolve_places(db, place_ids)

    for place_id in place_ids:
        if place_id not in places:
            raise PlaceNotFoundError(place_id)

    snapshots = {place_id: snapshot_place(place) for place_id, place in places.items()}
    return [build_stops(day, snapshots) for day in days]


async def prepare_itinerary(db: AsyncSession, payload: TripCreate) -> List[List[Stop]]:
    """Run every check and return the stops of each day, ready to encode."""
    validate_shape(payload)
    return await compose_days(db, payload.days)


def new_days(trip_id: int, itinerary: List[List[Stop]]) -> List[Day]:
    return [
        Day(trip_id=trip_id, position=position, places=encode_stops(stops))
        for position, stops in enumerate(itinerary)
    ]


def day_responses(days: List[Day], itinerary: List[List[Stop]]) -> List[DayResponse]:
    return [
        DayResponse(id=day.id, trip_id=day.trip_id, position=day.position, places=stops)
        for day, stops in zip(days, itinerary)
    ]


async def create_trip(db: AsyncSession, owner: int, payload: TripCreate) -> TripResponse:
    """
    Create a trip with its days.

    Returns:
        The persisted trip, without distance or fee
    """
    itinerary = await prepare_itinerary(db, payload)

    async with transaction(db, "create_trip"):
        trip = Trip(
            owner=owner,
            name=payload.name,
            from_date=from_epoch(payload.from_date),
            to_date=from_epoch(payload.to_date),
            users=payload.users,
            version=1,
        )
        db.add(trip)
        await db.flush()  # Get trip ID

        days = new_days(trip.id, itinerary)
        db.add_all(days)
        await db.flush()

    await db.refresh(trip)

    logger.info(
        "Trip created",
        extra={"trip_id": trip.id, "owner": owner, "days": len(days)}
    )
    return build_trip_response(trip, day_responses(days, itinerary))


async def update_trip(db: AsyncSession, trip_id: int, owner: int, payload: TripUpdate) -> TripResponse:
    """
    Replace the fields and the whole day list of an owned trip.

    Raises:
        TripNotFoundError: trip missing or not owned by ``owner``
        TripVersionConflictError: trip changed since ``payload.version``
            was read, or was changed/deleted while this update ran
    """
    trip = await load_owned_trip(db, trip_id, owner)
    current_version = trip.version

    itinerary = await prepare_itinerary(db, payload)

    if payload.version is not None and payload.version != current_version:
        raise TripVersionConflictError(trip_id, payload.version, current_version)

    async with transaction(db, "update_trip"):
        result = await db.execute(
            update(Trip)
            .where(Trip.id == trip_id, Trip.owner == owner, Trip.version == current_version)
            .values(
                name=payload.name,
                from_date=from_epoch(payload.from_date),
                to_date=from_epoch(payload.to_date),
                users=payload.users,
                version=current_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise TripVersionConflictError(trip_id, payload.version, current_version)

        await db.execute(
            delete(Day).where(Day.trip_id == trip_id).execution_options(synchronize_session=False)
        )

        days = new_days(trip_id, itinerary)
        db.add_all(days)
        await db.flush()

    await db.refresh(trip)

    logger.info(
        "Trip updated",
        extra={"trip_id": trip_id, "owner": owner, "days": len(days), "version": trip.version}
    )
    return build_trip_response(trip, day_responses(days, itinerary))


async def delete_trip(db: AsyncSession, trip_id: int, owner: int) -> None:
    """
    Delete an owned trip and all of its days.

    Raises:
        TripNotFoundError: trip missing or not owned by ``owner``
    """
    trip = await load_owned_trip(db, trip_id, owner)

    async with transaction(db, "delete_trip"):
        await db.execute(
            delete(Day).where(Day.trip_id == trip.id).execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Trip).where(Trip.id == trip.id, Trip.owner == owner).execution_options(synchronize_session=False)
        )

    logger.info("Trip deleted", extra={"trip_id": trip_id, "owner": owner})
