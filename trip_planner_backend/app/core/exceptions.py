"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
Every error leaves the API as the same envelope:
{"error_code": ..., "message": ..., "details": {...}}
"""

import logging
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger("trip_planner.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None, error_code: str = "ERR_NOT_FOUND_001"):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class PlaceNotFoundError(ResourceNotFoundError):
    """Raised when a stop references a place that does not exist."""

    def __init__(self, place_id: int):
        self.place_id = place_id
        super().__init__("Place", place_id, error_code="ERR_NOT_FOUND_PLACE")


class TripNotFoundError(ResourceNotFoundError):
    """
    Raised when a trip does not exist for the calling owner.

    A trip owned by someone else is reported exactly like a missing one.
    """

    def __init__(self, trip_id: int):
        self.trip_id = trip_id
        super().__init__("Trip", trip_id, error_code="ERR_NOT_FOUND_TRIP")


class TripValidationError(AppException):
    """Base class for trip composition rule violations (HTTP 400)."""

    def __init__(self, message: str, error_code: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class DaysEmptyError(TripValidationError):
    """Raised when a trip is submitted without any day."""

    def __init__(self):
        super().__init__("Days must be selected", "ERR_TRIP_DAYS_EMPTY")


class PlacesEmptyInDayError(TripValidationError):
    """Raised when one of the submitted days has no stop."""

    def __init__(self, day_index: int):
        self.day_index = day_index
        super().__init__(
            "Places must be selected",
            "ERR_TRIP_PLACES_EMPTY",
            details={"day_index": day_index}
        )


class InvalidDateRangeError(TripValidationError):
    """Raised when from_date is after to_date."""

    def __init__(self, from_date: int, to_date: int):
        super().__init__(
            "from_date must not be after to_date",
            "ERR_TRIP_DATE_RANGE",
            details={"from_date": from_date, "to_date": to_date}
        )


class MissingReferenceLocationError(AppException):
    """Raised when a trip read is requested without a reference point."""

    def __init__(self):
        super().__init__(
            message="Must provide longitude and latitude",
            error_code="ERR_LOCATION_REQUIRED",
            status_code=status.HTTP_400_BAD_REQUEST
        )


class TripVersionConflictError(AppException):
    """Raised when a trip changed since the caller last read it."""

    def __init__(self, trip_id: int, expected_version: Any = None, current_version: Any = None):
        super().__init__(
            message="Trip was modified by another request",
            error_code="ERR_TRIP_CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details={
                "trip_id": trip_id,
                "expected_version": expected_version,
                "current_version": current_version,
            }
        )


class StorageFailureError(AppException):
    """Raised when a transactional write or read fails at the storage layer."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            message="An internal server error occurred",
            error_code="ERR_INTERNAL_SERVER",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class StopDecodeError(AppException):
    """Raised when a persisted day itinerary cannot be decoded."""

    def __init__(self, reason: str, day_id: Any = None):
        self.reason = reason
        self.day_id = day_id
        super().__init__(
            message="An internal server error occurred",
            error_code="ERR_INTERNAL_SERVER",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    def __str__(self):
        return f"Cannot decode stops of day {self.day_id}: {self.reason}"


class PlaceImagesDecodeError(AppException):
    """Raised when a stored place image list cannot be decoded."""

    def __init__(self, reason: str, place_id: Any = None):
        self.reason = reason
        self.place_id = place_id
        super().__init__(
            message="An internal server error occurred",
            error_code="ERR_INTERNAL_SERVER",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    def __str__(self):
        return f"Cannot decode images of place {self.place_id}: {self.reason}"


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    if exc.status_code >= 500:
        logger.error(
            "Internal error",
            extra={"path": request.url.path, "error_code": exc.error_code, "reason": str(exc)}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_errors(exc)
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold the raw exception object, which JSONResponse cannot render
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        exc_info=exc,
        extra={"path": request.url.path, "exception_type": type(exc).__name__}
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
