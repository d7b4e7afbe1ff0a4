"""
Trip schemas.

Request models for trip composition, the itinerary stop value stored inside
each day, and the response models returned by trip reads.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from trip_planner_backend.app.models.trip_enums import VehicleType


# Requests

class StopCreate(BaseModel):
    """One planned visit, as submitted by the client."""
    place_id: int = Field(..., ge=1, description="Place to visit")
    note: str = Field("", max_length=2000)
    visit_time: int = Field(0, ge=0, description="Planned visit duration")
    start_time: int = Field(0, ge=0, description="Planned start time")
    vehicle: VehicleType = VehicleType.UNSPECIFIED


class DayCreate(BaseModel):
    """One day of the itinerary, stops in visiting order."""
    places: List[StopCreate] = []


class TripCreate(BaseModel):
    """Schema for creating a trip."""
    name: str = Field(..., min_length=1, max_length=255)
    from_date: int = Field(..., ge=1, description="Unix epoch seconds")
    to_date: int = Field(..., ge=1, description="Unix epoch seconds")
    users: int = Field(1, ge=0, description="Participant headcount")
    days: List[DayCreate] = []


class TripUpdate(TripCreate):
    """
    Schema for replacing a trip.

    ``version`` is optional; when given it must match the stored version.
    """
    version: Optional[int] = Field(None, ge=1)


# Itinerary values

class PlaceSnapshot(BaseModel):
    """Copy of a place taken when the stop was written."""
    id: int
    name: str
    address: str
    latitude: float
    longitude: float
    description: str = ""
    price: float = 0.0
    images: List[str] = []


class Stop(BaseModel):
    """
    A stop as stored in a day and returned to clients.

    ``distance`` (km from the caller's reference point) is filled on read.
    """
    place_id: int
    note: str = ""
    visit_time: int = 0
    start_time: int = 0
    vehicle: VehicleType = VehicleType.UNSPECIFIED
    place: PlaceSnapshot
    distance: Optional[float] = None


# Responses

class DayResponse(BaseModel):
    """Schema for a decoded day."""
    id: int
    trip_id: int
    position: int
    places: List[Stop]


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: int
    owner: int
    name: str
    from_date: int
    to_date: int
    users: int
    version: int
    created_at: datetime
    updated_at: datetime
    days: List[DayResponse] = []
    trip_fee: Optional[float] = None


class TripListResponse(BaseModel):
    """Schema for paginated trip list."""
    trips: List[TripResponse]
    total: int
    page: int
    page_size: int


class TripDeleteResponse(BaseModel):
    """Response after trip deletion."""
    status: str = "deleted"
    trip_id: int
