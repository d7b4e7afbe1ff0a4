"""
Itinerary enrichment.

Fills the read-time fields of loaded trips: the distance of every stop from
the caller's reference point and the total fee of every trip. Works purely
on already decoded trips, so list and detail reads compute them the same way.
"""

from typing import Iterable, List

from trip_planner_backend.app.schemas.trip import TripResponse
from trip_planner_backend.app.services.geo import GeoPoint, haversine_distance


def annotate_distances(trip: TripResponse, reference: GeoPoint) -> None:
    """Set ``distance`` (km) on every stop, replacing any previous value."""
    for day in trip.days:
        for stop in day.places:
            stop.distance = haversine_distance(
                stop.place.latitude,
                stop.place.longitude,
                reference.latitude,
                reference.longitude,
            )


def compute_trip_fee(trip: TripResponse) -> float:
    """Sum of the snapshot price of every stop, times the headcount."""
    total_price = sum((stop.place.price for day in trip.days for stop in day.places), 0.0)
    return total_price * trip.users


def enrich_trip(trip: TripResponse, reference: GeoPoint) -> TripResponse:
    annotate_distances(trip, reference)
    trip.trip_fee = compute_trip_fee(trip)
    return trip


def enrich_trips(trips: Iterable[TripResponse], reference: GeoPoint) -> List[TripResponse]:
    return [enrich_trip(trip, reference) for trip in trips]
