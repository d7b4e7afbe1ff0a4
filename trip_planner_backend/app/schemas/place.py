"""
Place and Category Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import List


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: int
    name: str
    description: str
    icon: str

    class Config:
        from_attributes = True


class PlaceResponse(BaseModel):
    """Schema for place response."""
    id: int
    name: str
    address: str
    description: str
    latitude: float
    longitude: float
    price: float
    images: List[str]
    categories: List[int] = []
    created_at: datetime
    updated_at: datetime


class PlaceListResponse(BaseModel):
    """Schema for paginated place list."""
    places: List[PlaceResponse]
    total: int
    page: int
    page_size: int


class NearbyPlace(BaseModel):
    """A place with its distance from the requested point."""
    place: PlaceResponse
    distance: float


class NearbyPlacesResponse(BaseModel):
    """Schema for nearby place search."""
    latitude: float
    longitude: float
    radius_km: float
    places: List[NearbyPlace]
