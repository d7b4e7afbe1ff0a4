"""
FastAPI Application Entry Point.

This is the main application file for the Trip Planner Backend.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from trip_planner_backend.app.core.config import settings
from trip_planner_backend.app.api.v1.router import router as api_v1_router
from trip_planner_backend.app.core.jwt import create_access_token
from trip_planner_backend.app.core.observability import ObservabilityMiddleware, configure_logging
from trip_planner_backend.app.db.session import engine, Base
from trip_planner_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from trip_planner_backend.app.models.place import Place, Category, PlaceCategory  # noqa: F401
from trip_planner_backend.app.models.trip import Trip  # noqa: F401
from trip_planner_backend.app.models.day import Day  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Configures logging.
    2. Creates database tables on startup.
    3. Disposes of the connection pool on shutdown.
    """
    configure_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Trip planning backend: multi-day itineraries over curated places",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.post("/auth/test-token", tags=["Authentication"])
async def generate_test_token(user_id: int = 1, username: str = "test_user"):
    """
    Generate a JWT for local development.

    Only available when ``debug`` is enabled; production tokens come from
    the account service.
    """
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    token = create_access_token(data={"sub": username, "user_id": user_id})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user_id": user_id,
        "username": username,
    }
