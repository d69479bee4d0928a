"""
===============================================================================
TARJETA CRC — api/exception_handlers.py (Manejo Centralizado de Excepciones)
===============================================================================

Responsabilidades:
  - Traducir excepciones de infraestructura a respuestas RFC 7807:
      DatabaseError     -> 503 DATABASE_ERROR
      NotificationError -> 503 NOTIFICATION_ERROR
      RoboChampError    -> 500 INTERNAL_ERROR
      Exception         -> 500 INTERNAL_ERROR (sin detalles en producción)
  - Body inválido (RequestValidationError) -> 422 VALIDATION_ERROR.
  - Loguear con request_id + error_id para correlación.
===============================================================================
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    request_validation_handler,
)
from ..crosscutting.exceptions import DatabaseError, NotificationError, RoboChampError
from ..crosscutting.logger import logger

# Mensajes públicos: el detalle real queda en el log (error_id).
_PUBLIC_DETAILS = {
    ErrorCode.DATABASE_ERROR: "Base de datos no disponible temporalmente.",
    ErrorCode.NOTIFICATION_ERROR: "No se pudo enviar el email. Reintentá en unos minutos.",
    ErrorCode.INTERNAL_ERROR: "Error interno.",
}


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: RoboChampError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    request_id = _request_id_from(request)

    logger.error(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error": exc.message,
            "request_id": request_id,
        },
    )

    detail = exc.message if not get_settings().is_production() else _PUBLIC_DETAILS[code]
    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=detail,
        errors=[{"error_id": exc.error_id}],
    )
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.DATABASE_ERROR, status_code=503
    )


async def notification_error_handler(
    request: Request, exc: NotificationError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.NOTIFICATION_ERROR, status_code=503
    )


async def robochamp_error_handler(request: Request, exc: RoboChampError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id_from(request)

    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"request_id": request_id, "error": str(exc)},
    )

    detail = str(exc) if not get_settings().is_production() else "Error interno."
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """AppHTTPException conserva RFC 7807; Exception queda como fallback."""
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(NotificationError, notification_error_handler)
    app.add_exception_handler(RoboChampError, robochamp_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
