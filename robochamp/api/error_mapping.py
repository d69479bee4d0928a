"""
===============================================================================
TARJETA CRC — api/error_mapping.py
===============================================================================

Responsabilidades:
  - Traducir AuthErrorCode (capa application) a AppHTTPException (RFC 7807).

Tabla:
  VALIDATION_ERROR         -> 422
  CONFLICT_IDENTITY        -> 409
  INVALID_CREDENTIALS      -> 401 (code INVALID_CREDENTIALS)
  INVALID_OR_EXPIRED_TOKEN -> 401 (code INVALID_OR_EXPIRED_TOKEN)
  EMAIL_NOT_VERIFIED       -> 403 (code EMAIL_NOT_VERIFIED)
  EMAIL_ALREADY_VERIFIED   -> 403
  ACCESS_DENIED            -> 403
  NOT_FOUND                -> 404
===============================================================================
"""

from __future__ import annotations

from typing import NoReturn

from ..application.usecases.auth import AuthError, AuthErrorCode
from ..crosscutting.error_responses import (
    ErrorCode,
    conflict,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)


def raise_auth_error(error: AuthError, *, identifier: str = "unknown") -> NoReturn:
    code, message = error.code, error.message

    if code == AuthErrorCode.VALIDATION_ERROR:
        raise validation_error(message)
    if code == AuthErrorCode.CONFLICT_IDENTITY:
        raise conflict(message)
    if code == AuthErrorCode.INVALID_CREDENTIALS:
        raise unauthorized(message, code=ErrorCode.INVALID_CREDENTIALS)
    if code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN:
        raise unauthorized(message, code=ErrorCode.INVALID_OR_EXPIRED_TOKEN)
    if code == AuthErrorCode.EMAIL_NOT_VERIFIED:
        raise forbidden(message, code=ErrorCode.EMAIL_NOT_VERIFIED)
    if code in (AuthErrorCode.EMAIL_ALREADY_VERIFIED, AuthErrorCode.ACCESS_DENIED):
        raise forbidden(message)
    if code == AuthErrorCode.NOT_FOUND:
        raise not_found("Usuario", identifier)

    # Fallback seguro: un código nuevo sin mapear se trata como 403.
    raise forbidden(message)
