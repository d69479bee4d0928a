"""
USE CASE: Logout

Termina la sesión del usuario limpiando el hash de refresh. Es idempotente:
un logout sin sesión activa (o repetido) también es éxito.
El access token ya emitido sigue siendo válido hasta su exp (stateless).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .auth_results import AuthCommandResult
from .session_tokens import SessionTokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogoutInput:
    user_id: int


class LogoutUseCase:
    def __init__(self, sessions: SessionTokenService) -> None:
        self._sessions = sessions

    def execute(self, input_data: LogoutInput) -> AuthCommandResult:
        ended = self._sessions.end_session(input_data.user_id)
        logger.info(
            "Logout", extra={"user_id": input_data.user_id, "session_ended": ended}
        )
        return AuthCommandResult(ok=True)
