"""
===============================================================================
USE CASE: Verify Email
===============================================================================

Business Goal:
    Consumir el token del link de verificación, marcar el email como verificado
    y abrir una sesión (el usuario queda logueado al confirmar).

Responsibilities:
    - Token inexistente, ya consumido o vencido -> INVALID_OR_EXPIRED_TOKEN.
    - El consumo es atómico: un token sirve una sola vez.

Collaborators:
    - VerificationFlow (claim / consume)
    - SessionTokenService
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .auth_results import (
    INVALID_OR_EXPIRED_TOKEN_MESSAGE,
    AuthErrorCode,
    TokenPairResult,
    auth_error,
)
from .session_tokens import SessionTokenService
from .verification_flow import VerificationFlow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifyEmailInput:
    token: str


class VerifyEmailUseCase:
    def __init__(
        self, verification: VerificationFlow, sessions: SessionTokenService
    ) -> None:
        self._verification = verification
        self._sessions = sessions

    def execute(self, input_data: VerifyEmailInput) -> TokenPairResult:
        pending = self._verification.claim((input_data.token or "").strip())
        if pending is None:
            return self._invalid_token()

        user = self._verification.consume(pending, mark_verified=True)
        if user is None:
            return self._invalid_token()

        logger.info("Email verificado", extra={"user_id": user.id})
        return TokenPairResult(tokens=self._sessions.start_session(user))

    @staticmethod
    def _invalid_token() -> TokenPairResult:
        return TokenPairResult(
            error=auth_error(
                AuthErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_OR_EXPIRED_TOKEN_MESSAGE
            )
        )
