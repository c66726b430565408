from typing import Any, Dict, List, Optional
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError

from schoolhub.core.logging import logger


class BaseAPIError(Exception):
    """Base exception class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(BaseAPIError):
    """Malformed, missing or out-of-range input"""
    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details
        )


class AuthenticationError(BaseAPIError):
    """No valid session"""
    def __init__(
        self,
        message: str = "Authentication required",
        error_code: str = "AUTH_ERROR",
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            details=details
        )


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")


class PermissionDenied(BaseAPIError):
    """Authenticated, but the role or scope is insufficient"""
    def __init__(
        self,
        message: str = "Access denied - insufficient permissions",
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
            details=details
        )


class NotFoundError(BaseAPIError):
    """Target row absent or outside the caller's scope"""
    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details
        )


class ConflictError(BaseAPIError):
    """Uniqueness violation"""
    def __init__(
        self,
        message: str = "Resource already exists",
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details=details
        )


class PreconditionFailed(BaseAPIError):
    """Guarded operation refused, e.g. deleting a class that still has students"""
    def __init__(
        self,
        message: str,
        blocked: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Any] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="PRECONDITION_FAILED",
            details=details
        )
        self.blocked = blocked or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["blocked"] = self.blocked
        return body


class DatabaseError(BaseAPIError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DB_ERROR"
        )


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def api_error_handler(request: Request, exc: BaseAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
            exc_info=exc,
            extra={"request_id": _request_id(request)}
        )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


def _field_errors(errors) -> List[Dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg"),
        }
        for error in errors
    ]


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _field_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "Validation failed", "details": details})
    )


async def model_validation_handler(request: Request, exc: PydanticValidationError) -> JSONResponse:
    # models built by hand from multipart form fields
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"error": "Validation failed", "details": _field_errors(exc.errors())})
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error on {request.method} {request.url.path}: {type(exc).__name__}",
        exc_info=exc,
        extra={"request_id": _request_id(request)}
    )
    error = DatabaseError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}",
        exc_info=exc,
        extra={"request_id": _request_id(request)}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(PydanticValidationError, model_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
