"""
===============================================================================
MÓDULO: Problem Details (RFC 7807) para la API de auth
===============================================================================

Todas las respuestas de error salen como `application/problem+json` con un
`code` estable. El frontend decide por `code` (por ejemplo, EMAIL_NOT_VERIFIED
muestra "reenviar verificación"); soporte correlaciona por request_id.

Componentes:
  - ErrorCode: catálogo de códigos.
  - ErrorDetail: payload.
  - AppHTTPException + factories (401 agrega `WWW-Authenticate: Bearer`).
  - app_exception_handler / request_validation_handler.

Colaboradores:
  - api/error_mapping.py (AuthErrorCode -> HTTP)
  - api/exception_handlers.py (errores de infraestructura)
  - identity/bearer.py (401/403 de tokens)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"

    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    NOTIFICATION_ERROR = "NOTIFICATION_ERROR"


class ErrorDetail(BaseModel):
    """
    Problem Details + `code` estable.

    `errors` lleva detalles por campo (validación) y los ids de correlación
    (request_id, error_id).
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_STATUS_TITLES = {
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Validation Error",
    503: "Service Unavailable",
}

OPENAPI_ERROR_RESPONSES = {
    str(status): {
        "description": f"{title} (problem+json)",
        "model": ErrorDetail,
        "content": {
            PROBLEM_JSON_MEDIA_TYPE: {
                "schema": {"$ref": "#/components/schemas/ErrorDetail"}
            }
        },
    }
    for status, title in _STATUS_TITLES.items()
}


class AppHTTPException(HTTPException):
    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


def not_found(resource: str, identifier: str) -> AppHTTPException:
    return AppHTTPException(
        404, ErrorCode.NOT_FOUND, f"{resource} '{identifier}' no encontrado"
    )


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def unauthorized(
    detail: str = "Autenticación requerida",
    code: ErrorCode = ErrorCode.UNAUTHORIZED,
) -> AppHTTPException:
    return AppHTTPException(
        401, code, detail, headers={"WWW-Authenticate": "Bearer"}
    )


def forbidden(
    detail: str = "Acceso denegado",
    code: ErrorCode = ErrorCode.FORBIDDEN,
) -> AppHTTPException:
    return AppHTTPException(403, code, detail)


# ---------------------------------------------------------------------------
# Handlers FastAPI
# ---------------------------------------------------------------------------
def _problem(
    request: Request,
    *,
    status_code: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    errors = list(errors or [])
    if request_id:
        errors.append({"request_id": request_id})

    body = ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=_STATUS_TITLES.get(status_code, code.value.replace("_", " ").title()),
        status=status_code,
        detail=detail,
        code=code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return _problem(
        request,
        status_code=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        errors=exc.errors,
        headers=exc.headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body mal formado (DTO) -> 422 VALIDATION_ERROR, sin eco del input."""
    fields = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return _problem(
        request,
        status_code=422,
        code=ErrorCode.VALIDATION_ERROR,
        detail="Request inválido.",
        errors=fields,
    )
