"""
Codec for the text columns that hold structured lists.

A day's stops are stored as a JSON array, one object per stop, in visiting
order. Each object carries the place snapshot taken at write time so the
itinerary stays readable after the place is edited. Decoding is an explicit
step run right after every day fetch.

Place image lists use the same JSON array encoding.
"""

import json
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from trip_planner_backend.app.core.exceptions import PlaceImagesDecodeError, StopDecodeError
from trip_planner_backend.app.schemas.trip import Stop


def encode_stops(stops: Sequence[Stop]) -> str:
    """Serialize stops in order. Read-time fields are not written."""
    return json.dumps(
        [stop.model_dump(mode="json", exclude={"distance"}) for stop in stops],
        ensure_ascii=False,
    )


def decode_stops(raw: Optional[str], day_id: Any = None) -> List[Stop]:
    """
    Parse a stored stop list back into Stop models, order preserved.

    Raises:
        StopDecodeError: content is not a JSON array of valid stops
    """
    if raw is None:
        raise StopDecodeError("no stored content", day_id)

    try:
        items = json.loads(raw)
    except ValueError as exc:
        raise StopDecodeError(f"invalid JSON ({exc})", day_id) from exc

    if not isinstance(items, list):
        raise StopDecodeError(f"expected a JSON array, got {type(items).__name__}", day_id)

    try:
        return [Stop.model_validate(item) for item in items]
    except ValidationError as exc:
        raise StopDecodeError(f"invalid stop ({exc.error_count()} errors)", day_id) from exc


def encode_images(images: Sequence[str]) -> str:
    return json.dumps(list(images), ensure_ascii=False)


def decode_images(raw: Optional[str], place_id: Any = None) -> List[str]:
    """
    Image URLs of a place; an empty column means no images.

    Raises:
        PlaceImagesDecodeError: content is not a JSON array
    """
    if not raw:
        return []

    try:
        images = json.loads(raw)
    except ValueError as exc:
        raise PlaceImagesDecodeError(f"invalid JSON ({exc})", place_id) from exc

    if not isinstance(images, list):
        raise PlaceImagesDecodeError(f"expected a JSON array, got {type(images).__name__}", place_id)
    return [str(image) for image in images]
