# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the API. Every error the API reports is a
# CatalogException subclass carrying an HTTP status, a stable machine code
# and a client-facing message (Spanish, the storefront's language).
#
#   400  validation   InvalidIdError, MissingFieldsError, ...
#   401  auth         UnauthorizedError, InvalidTokenError, SessionExpiredError, ...
#   404  not found    ProductNotFoundError, AdminNotFoundError, RouteNotFoundError
#   429  throttling   AccountLockedError, RateLimitedError
#   500  upstream     UpstreamError (data store / CDN failures)
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class CatalogException(Exception):
    """
    Base exception for the catalog API.

    All custom exceptions inherit from this class and are rendered by
    catalog_exception_handler as {"detail": ..., "code": ..., "details": ...}.
    """

    def __init__(
        self,
        message: str,
        code: str = "CATALOG_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Errors (400)
# =============================================================================

class ValidationError(CatalogException):
    """Malformed or missing input, detected before any data-store call."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status_code=400, details=details)


class InvalidIdError(ValidationError):
    """Raised when a path parameter is not a well-formed UUID."""

    def __init__(self, param: str = "id"):
        super().__init__("ID inválido", code="INVALID_ID", details={"param": param})


class MissingFieldsError(ValidationError):
    def __init__(self, fields: list[str], message: str = "Campos obligatorios faltantes"):
        super().__init__(message, code="MISSING_FIELDS", details={"fields": fields})


class MissingCredentialsError(ValidationError):
    def __init__(self):
        super().__init__("Email y contraseña son requeridos", code="MISSING_CREDENTIALS")


class InvalidEmailFormatError(ValidationError):
    def __init__(self):
        super().__init__("Formato de email inválido", code="INVALID_EMAIL_FORMAT")


class FieldTooLongError(ValidationError):
    def __init__(self, fields: list[str]):
        super().__init__(
            "Uno o más campos exceden el límite permitido",
            code="FIELD_TOO_LONG",
            details={"fields": fields},
        )


class PasswordMismatchError(ValidationError):
    def __init__(self):
        super().__init__("Las contraseñas no coinciden", code="PASSWORD_MISMATCH")


class WeakPasswordError(ValidationError):
    def __init__(self, min_length: int):
        super().__init__(
            f"La contraseña debe tener al menos {min_length} caracteres",
            code="WEAK_PASSWORD",
            details={"min_length": min_length},
        )


class EmailInUseError(ValidationError):
    def __init__(self):
        super().__init__("Este email ya está en uso", code="EMAIL_IN_USE")


class InvalidImageError(ValidationError):
    """Raised when an uploaded file is missing, too large or not an image."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="INVALID_IMAGE", details=details)


# =============================================================================
# Authentication / Authorization Errors (401, 429)
# =============================================================================

_BEARER = {"WWW-Authenticate": "Bearer"}


class AuthError(CatalogException):
    """Missing/invalid/expired token, bad credentials or a locked account."""

    def __init__(self, message: str, code: str, status_code: int = 401, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details=details,
            headers=_BEARER if status_code == 401 else None,
        )


class UnauthorizedError(AuthError):
    def __init__(self):
        super().__init__("No autorizado", code="UNAUTHORIZED")


class InvalidTokenError(AuthError):
    def __init__(self):
        super().__init__("Token inválido", code="INVALID_TOKEN")


class SessionExpiredError(AuthError):
    def __init__(self):
        super().__init__("Sesión expirada", code="SESSION_EXPIRED")


class InvalidCredentialsError(AuthError):
    """Same message whether the email or the password was wrong."""

    def __init__(self):
        super().__init__("Credenciales inválidas", code="INVALID_CREDENTIALS")


class IncorrectPasswordError(AuthError):
    def __init__(self):
        super().__init__("Contraseña actual incorrecta", code="INCORRECT_PASSWORD")


class AccountLockedError(AuthError):
    def __init__(self, remaining_minutes: int):
        super().__init__(
            f"Cuenta bloqueada temporalmente. Intenta de nuevo en {remaining_minutes} minutos.",
            code="ACCOUNT_LOCKED",
            status_code=429,
            details={"remaining_minutes": remaining_minutes},
        )


class RateLimitedError(CatalogException):
    def __init__(self, message: str = "Demasiadas solicitudes, intenta más tarde", retry_after: int | None = None):
        super().__init__(
            message=message,
            code="RATE_LIMITED",
            status_code=429,
            headers={"Retry-After": str(retry_after)} if retry_after else None,
        )


# =============================================================================
# Not Found Errors (404)
# =============================================================================

class NotFoundError(CatalogException):
    def __init__(self, message: str, code: str = "NOT_FOUND", details: dict[str, Any] | None = None):
        super().__init__(message=message, code=code, status_code=404, details=details)


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__("Producto no encontrado", code="PRODUCT_NOT_FOUND", details={"product_id": product_id})


class AdminNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Admin no encontrado", code="ADMIN_NOT_FOUND")


class ContactNotFoundError(NotFoundError):
    def __init__(self, contact_id: str):
        super().__init__("Mensaje no encontrado", code="CONTACT_NOT_FOUND", details={"contact_id": contact_id})


class RouteNotFoundError(NotFoundError):
    def __init__(self, path: str):
        super().__init__("Ruta no encontrada", code="ROUTE_NOT_FOUND", details={"path": path})


# =============================================================================
# Upstream Errors (500)
# =============================================================================

class UpstreamError(CatalogException):
    """
    A data-store or CDN call failed.

    The driver's message is kept on `cause` for logging only; clients get
    the generic message.
    """

    def __init__(self, message: str = "Error en el servidor", cause: str | None = None):
        super().__init__(message=message, code="UPSTREAM_ERROR", status_code=500)
        self.cause = cause


# =============================================================================
# Exception Handlers
# =============================================================================

async def catalog_exception_handler(
    request: Request,
    exc: CatalogException
) -> JSONResponse:
    """Convert CatalogException to JSON response."""
    if isinstance(exc, UpstreamError):
        logger.error(f"Upstream failure on {request.method} {request.url.path}: {exc.cause or exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body/parameter validation errors.

    Wrong JSON types are client mistakes like any other: 400, not 422.
    """
    fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Datos de entrada inválidos",
            "code": "VALIDATION_ERROR",
            "details": {"fields": fields},
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unmatched routes, wrong methods) in the API's shape."""
    if exc.status_code == 404:
        error = RouteNotFoundError(request.url.path)
        return JSONResponse(status_code=404, content={"detail": error.message, "code": error.code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Last-resort handler: log everything, reveal nothing."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Error interno del servidor",
            "code": "INTERNAL_ERROR",
        }
    )
