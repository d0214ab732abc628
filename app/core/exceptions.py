import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PlacementError(HTTPException):
    """Base class for errors that map to a fixed HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class Unauthorized(PlacementError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(PlacementError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class InvalidReference(PlacementError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid reference"


class NotFound(PlacementError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidState(PlacementError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state"


class Conflict(PlacementError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class ValidationFailed(PlacementError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, issues: Optional[list[dict[str, Any]]] = None, message: Optional[str] = None):
        super().__init__(message)
        self.issues = issues or []


# --- HTTP boundary ---

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body: dict[str, Any] = {"message": exc.detail}
    if isinstance(exc, ValidationFailed):
        body["issues"] = exc.issues
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed", "issues": jsonable_encoder(issues)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
