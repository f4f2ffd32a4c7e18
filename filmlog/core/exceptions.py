"""Application error taxonomy and the FastAPI handlers that render it.

Every failure leaves the API as::

    {"success": false, "error": {"code", "message", "details", "request_id"}}

Services raise the ``AppException`` subclasses below; anything else is
treated as an internal fault and reported without diagnostic detail.
"""

from enum import StrEnum
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from filmlog.core.logging import get_logger

logger = get_logger("errors")


class ErrorCode(StrEnum):
    """Stable error categories exposed to clients."""

    # 404
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    MOVIE_NOT_FOUND = "MOVIE_NOT_FOUND"
    REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
    LIKE_NOT_FOUND = "LIKE_NOT_FOUND"
    LIST_NOT_FOUND = "LIST_NOT_FOUND"
    LIST_ITEM_NOT_FOUND = "LIST_ITEM_NOT_FOUND"
    WATCHLIST_ENTRY_NOT_FOUND = "WATCHLIST_ENTRY_NOT_FOUND"

    # 400 / 409
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_RATING = "INVALID_RATING"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"

    # 401 / 403
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_INVALID = "TOKEN_INVALID"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    FORBIDDEN = "FORBIDDEN"

    # 5xx
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Body of the ``error`` key."""

    code: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None


class ErrorWrapper(BaseModel):
    success: bool = False
    error: ErrorResponse


class AppException(Exception):
    """Base class for errors that map onto an HTTP status and error code.

    Subclasses set ``status_code`` and a default ``code``; callers may
    override the code per instance (e.g. ``REVIEW_NOT_FOUND``).
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        code: ErrorCode | None = None,
        details: list[dict[str, str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.details = details

    def to_response(self, request_id: str | None = None) -> dict[str, Any]:
        """Render the error envelope."""
        body = ErrorResponse(
            code=self.code,
            message=self.message,
            details=[ErrorDetail(**item) for item in self.details] if self.details else None,
            request_id=request_id,
        )
        return ErrorWrapper(error=body).model_dump()


class NotFoundError(AppException):
    """The referenced entity does not exist.

    Private resources requested by anyone but their owner raise this too,
    so callers cannot probe for their existence.
    """

    status_code = status.HTTP_404_NOT_FOUND
    code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Any = None,
        *,
        code: ErrorCode | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"{resource} not found"
                if resource_id is None
                else f"{resource} with id '{resource_id}' not found"
            )
        super().__init__(message, code=code)


class ValidationError(AppException):
    """Malformed or out-of-range input, raised before any write."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.VALIDATION_ERROR

    @classmethod
    def for_field(cls, field: str, message: str, *, code: ErrorCode | None = None) -> "ValidationError":
        return cls(message, code=code, details=[{"field": field, "message": message}])


class ConflictError(AppException):
    """A natural key (one review per film, one like per review...) is already taken."""

    status_code = status.HTTP_409_CONFLICT
    code = ErrorCode.DUPLICATE_RESOURCE

    def __init__(
        self,
        resource: str = "Resource",
        field: str | None = None,
        value: Any = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            suffix = f" with {field} '{value}'" if field and value else ""
            message = f"{resource}{suffix} already exists"
        super().__init__(message)


class AuthenticationError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.INVALID_CREDENTIALS


class AuthorizationError(AppException):
    """The caller does not own the resource they are changing."""

    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.FORBIDDEN


class AccountInactiveError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    code = ErrorCode.ACCOUNT_INACTIVE

    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message)


class UpstreamUnavailableError(AppException):
    """TMDB could not be reached or answered with an error.

    The provider's HTTP status, when there was one, is kept in
    ``upstream_status`` and echoed in the error details.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = ErrorCode.UPSTREAM_UNAVAILABLE

    def __init__(
        self,
        message: str = "Movie provider is unavailable",
        *,
        upstream_status: int | None = None,
    ) -> None:
        self.upstream_status = upstream_status
        details = (
            [{"field": "upstream_status", "message": str(upstream_status)}]
            if upstream_status is not None
            else None
        )
        super().__init__(message, details=details)


# ─────────────────────────────────────────────────────────────────────────────
# Handlers
# ─────────────────────────────────────────────────────────────────────────────


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _render(request: Request, error: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_response(_request_id(request)),
    )


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    return _render(request, exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Re-shape FastAPI's body/query validation failures into a 400 envelope."""
    details = []
    for error in exc.errors():
        # loc is ("body", "field", ...) or ("query", "name")
        loc = [str(part) for part in error.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc)
        details.append({"field": field, "message": error.get("msg", "Invalid value")})
    return _render(request, ValidationError("Request validation failed", details=details))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and answer with a generic internal error."""
    logger.exception(
        "Unhandled exception",
        extra={
            "request_id": _request_id(request),
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return _render(request, AppException(code=ErrorCode.INTERNAL_ERROR))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected)
