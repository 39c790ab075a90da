from fastapi import Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base error for failures the API reports to the caller."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(AppError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class BookingConflictError(ConflictError):
    """The requested stay overlaps an active booking of the same room."""

    default_message = "Room is not available for the selected dates"


def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)
