"""
===============================================================================
AUTH USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Name:
    Auth Use Case Results

Business Goal:
    Proveer modelos compartidos de resultados y errores para los casos de uso
    de autenticación, con un set chico y estable de códigos que el caller
    puede mapear (HTTP, CLI, tests) sin ver internos de storage/hasher.

Why (Context / Intención):
    - Los errores de negocio se devuelven tipados (no se lanzan), igual que en
      el resto de los casos de uso.
    - Los mensajes son uniformes para no revelar qué mitad de email/password
      falló (anti-enumeración).
    - Las fallas de infraestructura (DB, mail) NO viven acá: se propagan como
      excepción (crosscutting.exceptions).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    auth_results models (module)

Responsibilities:
    - Definir AuthErrorCode y AuthError (code + message).
    - Representar resultados: SignUpResult, TokenPairResult,
      VerificationRequestResult, AuthCommandResult.

Collaborators:
    - identity.tokens.TokenPair
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ....identity.tokens import TokenPair


class AuthErrorCode(str, Enum):
    """
    Códigos de error de los casos de uso de auth.

    Códigos:
      - VALIDATION_ERROR: input mal formado (email, password vacío, etc.).
      - CONFLICT_IDENTITY: signup con email ya registrado.
      - INVALID_CREDENTIALS: email desconocido o password incorrecto (uniforme).
      - EMAIL_NOT_VERIFIED: signin antes de completar la verificación.
      - EMAIL_ALREADY_VERIFIED: se pidió re-verificación de un email verificado.
      - NOT_FOUND: operación autenticada sobre un user_id inexistente.
      - INVALID_OR_EXPIRED_TOKEN: token de link inexistente, consumido o vencido.
      - ACCESS_DENIED: refresh inválido/rotado o password actual incorrecto.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT_IDENTITY = "CONFLICT_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    EMAIL_ALREADY_VERIFIED = "EMAIL_ALREADY_VERIFIED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    ACCESS_DENIED = "ACCESS_DENIED"


# Mensajes estables (el caller no debería depender del texto, sino del code).
INVALID_CREDENTIALS_MESSAGE = "Credenciales inválidas."
ACCESS_DENIED_MESSAGE = "Acceso denegado."
INVALID_OR_EXPIRED_TOKEN_MESSAGE = "Token de verificación inválido o expirado."
EMAIL_NOT_VERIFIED_MESSAGE = "Verificá tu email antes de iniciar sesión."
CONFLICT_IDENTITY_MESSAGE = "El email ya está registrado."
USER_NOT_FOUND_MESSAGE = "Usuario no encontrado."
EMAIL_ALREADY_VERIFIED_MESSAGE = "El email ya fue verificado."


@dataclass(frozen=True)
class AuthError:
    """Error de caso de uso (categoría estable + mensaje humano)."""

    code: AuthErrorCode
    message: str


@dataclass
class SignUpResult:
    """
    Resultado de signup.

    Campos:
      - user_id: id del usuario creado (éxito)
      - verification_sent: False si el email de verificación no pudo salir
        (el usuario queda creado; puede pedir re-envío)
    """

    user_id: int | None = None
    verification_sent: bool = False
    error: AuthError | None = None


@dataclass
class TokenPairResult:
    """Resultado de los flujos que emiten sesión (signin, verify, refresh)."""

    tokens: TokenPair | None = None
    error: AuthError | None = None


@dataclass
class VerificationRequestResult:
    """Resultado del pedido de re-envío de verificación."""

    verification_sent: bool = False
    error: AuthError | None = None


@dataclass
class AuthCommandResult:
    """Resultado de comandos sin payload (logout, change/forgot/reset password)."""

    ok: bool = False
    error: AuthError | None = None


def auth_error(code: AuthErrorCode, message: str) -> AuthError:
    return AuthError(code=code, message=message)
