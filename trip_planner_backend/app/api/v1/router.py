"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from trip_planner_backend.app.api.v1.endpoints import places, trips

router = APIRouter()

# Places and categories (read-only)
router.include_router(places.router)

# Trip composition and itinerary reads
router.include_router(trips.router)
