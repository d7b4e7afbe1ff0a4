"""
Read access to places and categories.

Trips resolve the places referenced by their stops through this module and
embed a snapshot of each one.
"""

import math
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from trip_planner_backend.app.core.exceptions import PlaceNotFoundError
from trip_planner_backend.app.models.place import Place, Category, PlaceCategory
from trip_planner_backend.app.schemas.place import PlaceResponse
from trip_planner_backend.app.schemas.trip import PlaceSnapshot
from trip_planner_backend.app.services.day_codec import decode_images
from trip_planner_backend.app.services.geo import EARTH_RADIUS_KM, GeoPoint, distance_between

# Slack added to each side of the nearby prefilter box
BOX_MARGIN_DEG = 1e-6


async def resolve_place(db: AsyncSession, place_id: int) -> Place:
    """
    Fetch a place by ID.

    Raises:
        PlaceNotFoundError: no place has this ID
    """
    result = await db.execute(select(Place).where(Place.id == place_id))
    place = result.scalar_one_or_none()
    if place is None:
        raise PlaceNotFoundError(place_id)
    return place


async def resolve_places(db: AsyncSession, place_ids: Iterable[int]) -> Dict[int, Place]:
    """
    Fetch several places in one query.

    Missing IDs are simply absent from the returned mapping; the caller
    decides which one to report.
    """
    ids = set(place_ids)
    if not ids:
        return {}
    result = await db.execute(select(Place).where(Place.id.in_(ids)))
    return {place.id: place for place in result.scalars().all()}


def snapshot_place(place: Place) -> PlaceSnapshot:
    """Copy of the place fields embedded into an itinerary stop."""
    return PlaceSnapshot(
        id=place.id,
        name=place.name,
        address=place.address,
        latitude=place.latitude,
        longitude=place.longitude,
        description=place.description or "",
        price=place.price or 0.0,
        images=decode_images(place.images, place_id=place.id),
    )


async def categories_for_places(db: AsyncSession, place_ids: Iterable[int]) -> Dict[int, List[int]]:
    """Category IDs of each place, keyed by place ID."""
    ids = set(place_ids)
    if not ids:
        return {}
    result = await db.execute(
        select(PlaceCategory.place_id, PlaceCategory.category_id)
        .where(PlaceCategory.place_id.in_(ids))
        .order_by(PlaceCategory.place_id, PlaceCategory.category_id)
    )
    memberships: Dict[int, List[int]] = {}
    for place_id, category_id in result.all():
        memberships.setdefault(place_id, []).append(category_id)
    return memberships


def to_place_response(place: Place, category_ids: Optional[List[int]] = None) -> PlaceResponse:
    return PlaceResponse(
        id=place.id,
        name=place.name,
        address=place.address,
        description=place.description or "",
        latitude=place.latitude,
        longitude=place.longitude,
        price=place.price or 0.0,
        images=decode_images(place.images, place_id=place.id),
        categories=category_ids or [],
        created_at=place.created_at,
        updated_at=place.updated_at,
    )


async def list_places(
    db: AsyncSession,
    keyword: Optional[str] = None,
    category_id: Optional[int] = None,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[Place], int]:
    """
    Paginated place listing, most recently updated first.

    Args:
        keyword: Case-insensitive match against name or address
        category_id: Only places belonging to this category

    Returns:
        (places on the requested page, total matching places)
    """
    conditions = []
    if keyword:
        pattern = f"%{keyword.lower()}%"
        conditions.append(or_(func.lower(Place.name).like(pattern), func.lower(Place.address).like(pattern)))
    if category_id is not None:
        conditions.append(
            Place.id.in_(select(PlaceCategory.place_id).where(PlaceCategory.category_id == category_id))
        )

    count_query = select(func.count(Place.id))
    query = select(Place)
    for condition in conditions:
        count_query = count_query.where(condition)
        query = query.where(condition)

    total_result = await db.execute(count_query)
    total = total_result.scalar()

    offset = (page - 1) * page_size
    result = await db.execute(
        query.order_by(Place.updated_at.desc(), Place.id.desc()).offset(offset).limit(page_size)
    )
    return list(result.scalars().all()), total


def bounding_box(point: GeoPoint, radius_km: float) -> Tuple[float, float, Optional[Tuple[float, float]]]:
    """
    Latitude range and, when one applies, longitude range holding every point
    within ``radius_km`` of ``point``.

    The longitude range is None when the circle reaches a pole or crosses
    the antimeridian.
    """
    angular_radius = radius_km / EARTH_RADIUS_KM
    lat_delta = math.degrees(angular_radius) + BOX_MARGIN_DEG
    min_lat = point.latitude - lat_delta
    max_lat = point.latitude + lat_delta

    if min_lat <= -90.0 or max_lat >= 90.0:
        return min_lat, max_lat, None

    # Widest longitude offset on the circle, reached away from the centre's latitude
    ratio = math.sin(angular_radius) / math.cos(math.radians(point.latitude))
    if ratio >= 1.0:
        return min_lat, max_lat, None

    lon_delta = math.degrees(math.asin(ratio)) + BOX_MARGIN_DEG
    min_lon = point.longitude - lon_delta
    max_lon = point.longitude + lon_delta
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, None

    return min_lat, max_lat, (min_lon, max_lon)


async def find_nearby_places(
    db: AsyncSession,
    point: GeoPoint,
    radius_km: float,
    limit: int = 20,
) -> List[Tuple[Place, float]]:
    """
    Places within ``radius_km`` of ``point``, nearest first.

    A bounding box narrows the query; the exact cut uses haversine distance.
    """
    min_lat, max_lat, lon_range = bounding_box(point, radius_km)
    query = select(Place).where(Place.latitude >= min_lat, Place.latitude <= max_lat)
    if lon_range is not None:
        query = query.where(Place.longitude >= lon_range[0], Place.longitude <= lon_range[1])

    result = await db.execute(query)

    matches = []
    for place in result.scalars().all():
        distance = distance_between(point, GeoPoint(place.latitude, place.longitude))
        if distance <= radius_km:
            matches.append((place, distance))

    matches.sort(key=lambda match: (match[1], match[0].id))
    return matches[:limit]


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name, Category.id))
    return list(result.scalars().all())
