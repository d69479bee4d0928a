"""
===============================================================================
USE CASE: Sign In
===============================================================================

Business Goal:
    Autenticar email + password de un usuario verificado y abrir una sesión
    nueva (reemplaza cualquier sesión previa).

Responsibilities:
    - Misma respuesta para "email desconocido" y "password incorrecto".
    - Chequear el password ANTES que el estado de verificación: un tercero
      sin password no puede saber si la cuenta está verificada.
    - Re-hashear el password si los parámetros de argon2 cambiaron.
    - Input mal formado (email inválido, password vacío) -> VALIDATION_ERROR.

Collaborators:
    - UserCredentialRepository
    - PasswordHasher
    - SessionTokenService

Error Mapping:
    - INVALID_CREDENTIALS: email desconocido o password incorrecto
    - EMAIL_NOT_VERIFIED: credenciales correctas, email sin verificar
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....domain.repositories import UserCredentialRepository
from ....identity.passwords import PasswordHasher
from .auth_results import (
    EMAIL_NOT_VERIFIED_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    AuthErrorCode,
    TokenPairResult,
    auth_error,
)
from .credentials_policy import normalize_email, validate_email, validate_password
from .session_tokens import SessionTokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignInInput:
    email: str
    password: str


class SignInUseCase:
    def __init__(
        self,
        users: UserCredentialRepository,
        hasher: PasswordHasher,
        sessions: SessionTokenService,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._sessions = sessions

    def execute(self, input_data: SignInInput) -> TokenPairResult:
        email = normalize_email(input_data.email)
        problem = validate_email(email) or validate_password(input_data.password)
        if problem:
            return TokenPairResult(
                error=auth_error(AuthErrorCode.VALIDATION_ERROR, problem)
            )

        user = self._users.get_user_by_email(email)

        if user is None or not self._hasher.verify(
            user.password_hash, input_data.password
        ):
            return TokenPairResult(
                error=auth_error(
                    AuthErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
                )
            )

        if not user.email_verified:
            return TokenPairResult(
                error=auth_error(
                    AuthErrorCode.EMAIL_NOT_VERIFIED, EMAIL_NOT_VERIFIED_MESSAGE
                )
            )

        if self._hasher.needs_rehash(user.password_hash):
            self._users.update_password_hash(
                user.id, self._hasher.hash(input_data.password)
            )

        tokens = self._sessions.start_session(user)
        logger.info("Sesión iniciada", extra={"user_id": user.id})
        return TokenPairResult(tokens=tokens)
