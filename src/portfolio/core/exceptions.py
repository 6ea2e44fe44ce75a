"""Application error taxonomy and exception handlers with request_id in responses."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.portfolio.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a structured HTTP response."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"message": self.message, "error": self.code}
        if self.field is not None:
            content["field"] = self.field
        return content


class ValidationError(AppError):
    """A required field is missing or malformed."""

    status_code = 400
    code = "validation_error"


class ForbiddenError(AppError):
    """Role or ownership check failed."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    """No row matches the identifier."""

    status_code = 404
    code = "not_found"


class ConflictError(AppError):
    """Uniqueness violation or a state change that is not allowed."""

    status_code = 409
    code = "conflict"


class DependencyError(AppError):
    """Foreign-key restrict violation, e.g. deleting a user who still owns projects."""

    status_code = 409
    code = "dependency_conflict"


class InternalError(AppError):
    """Anything else. The message shown to clients is always generic."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


def classify_integrity_error(exc: IntegrityError) -> AppError:
    """Translate a database integrity failure into the application taxonomy."""
    detail = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()

    if "foreign key" in detail:
        if "users" in detail or "created_by" in detail:
            return DependencyError(
                "The referenced user cannot be removed or does not exist "
                "because projects still depend on it"
            )
        return DependencyError("The operation references a record that does not exist")
    if "unique" in detail or "duplicate key" in detail:
        return ConflictError("A record with the same unique value already exists")
    return InternalError()


def _request_id() -> str | None:
    return correlation_id.get()


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                path=request.url.path,
                error=exc.message,
                error_type=type(exc).__name__,
            )
        content = exc.to_content()
        content["request_id"] = _request_id()
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation failed",
                "error": ValidationError.code,
                "errors": errors,
                "request_id": _request_id(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "message": exc.detail,
                "request_id": _request_id(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = _request_id()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "message": "Internal server error",
                "error": InternalError.code,
                "request_id": request_id,
            },
        )
