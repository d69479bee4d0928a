"""
===============================================================================
USE CASE: Refresh Session
===============================================================================

Business Goal:
    Cambiar un refresh token vigente por un par nuevo (rotación).

Why (Context / Intención):
    - Solo el refresh MÁS RECIENTE del usuario sirve; uno ya rotado, o uno
      presentado después de logout, se rechaza.
    - La rotación es compare-and-set: si dos requests usan el mismo refresh
      a la vez, exactamente uno obtiene el par nuevo.

Inputs:
    RefreshSessionInput(user_id, refresh_token)
        user_id sale de los claims del refresh ya verificado (firma + exp).

Error Mapping:
    - ACCESS_DENIED: usuario inexistente, sin sesión, token no vigente o
      carrera perdida (mismo mensaje para todos)
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....domain.repositories import UserCredentialRepository
from .auth_results import (
    ACCESS_DENIED_MESSAGE,
    AuthErrorCode,
    TokenPairResult,
    auth_error,
)
from .session_tokens import SessionTokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshSessionInput:
    user_id: int
    refresh_token: str


class RefreshSessionUseCase:
    def __init__(
        self, users: UserCredentialRepository, sessions: SessionTokenService
    ) -> None:
        self._users = users
        self._sessions = sessions

    def execute(self, input_data: RefreshSessionInput) -> TokenPairResult:
        user = self._users.get_user_by_id(input_data.user_id)
        if user is None or not user.has_active_session:
            return self._denied()

        tokens = self._sessions.rotate(user, input_data.refresh_token)
        if tokens is None:
            logger.info("Refresh rechazado", extra={"user_id": user.id})
            return self._denied()

        return TokenPairResult(tokens=tokens)

    @staticmethod
    def _denied() -> TokenPairResult:
        return TokenPairResult(
            error=auth_error(AuthErrorCode.ACCESS_DENIED, ACCESS_DENIED_MESSAGE)
        )
