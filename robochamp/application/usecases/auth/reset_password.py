"""
===============================================================================
USE CASE: Reset Password
===============================================================================

Business Goal:
    Consumir el token de reset y reemplazar el password en el mismo UPDATE.

Responsibilities:
    - Validar el password nuevo antes de tocar el token.
    - Resolver el token (inexistente / consumido / vencido -> error uniforme).
    - Hashear el password nuevo y consumir el token atómicamente.

Notas:
    - No toca email_verified ni la sesión vigente.

Error Mapping:
    - VALIDATION_ERROR: password nuevo vacío / demasiado largo
    - INVALID_OR_EXPIRED_TOKEN
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....identity.passwords import PasswordHasher
from .auth_results import (
    INVALID_OR_EXPIRED_TOKEN_MESSAGE,
    AuthCommandResult,
    AuthErrorCode,
    auth_error,
)
from .credentials_policy import validate_password
from .verification_flow import VerificationFlow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetPasswordInput:
    token: str
    new_password: str


class ResetPasswordUseCase:
    def __init__(self, verification: VerificationFlow, hasher: PasswordHasher) -> None:
        self._verification = verification
        self._hasher = hasher

    def execute(self, input_data: ResetPasswordInput) -> AuthCommandResult:
        problem = validate_password(input_data.new_password, field="newPassword")
        if problem:
            return AuthCommandResult(
                error=auth_error(AuthErrorCode.VALIDATION_ERROR, problem)
            )

        pending = self._verification.claim((input_data.token or "").strip())
        if pending is None:
            return self._invalid_token()

        user = self._verification.consume(
            pending,
            mark_verified=False,
            password_hash=self._hasher.hash(input_data.new_password),
        )
        if user is None:
            return self._invalid_token()

        logger.info("Password restablecido", extra={"user_id": user.id})
        return AuthCommandResult(ok=True)

    @staticmethod
    def _invalid_token() -> AuthCommandResult:
        return AuthCommandResult(
            error=auth_error(
                AuthErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_OR_EXPIRED_TOKEN_MESSAGE
            )
        )
