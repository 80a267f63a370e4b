# app/core/exceptions.py
"""Domain errors for the scheduling engine and their HTTP mapping"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SchedulingError(Exception):
    """Base class for errors raised by the booking services"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(SchedulingError):
    """Business, service or booking missing (or owned by another business)"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UnauthorizedError(NotFoundError):
    """
    Caller does not own the resource.
    Answered exactly like NotFoundError so tenant existence is not leaked.
    """
    default_message = "Not found"


class ValidationError(SchedulingError, ValueError):
    """Malformed input"""
    default_message = "Invalid request"


class InvalidRangeError(ValidationError):
    default_message = "Start must be before end"


class ConflictError(SchedulingError):
    """Requested time conflicts with existing state; caller may retry with another slot"""
    default_message = "Conflict"


class TimeSlotUnavailableError(ConflictError):
    default_message = "Time slot not available"


class ServerError(SchedulingError):
    """Unexpected failure, already logged and rolled back by the route"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}",
        extra={"correlation_id": correlation_id}
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain errors as {"message": ...} responses"""
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
