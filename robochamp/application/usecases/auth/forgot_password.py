"""
USE CASE: Forgot Password

Emite un token de reset para el email dado y envía el link
`{frontend_url}/reset-password?token=...`.

Error Mapping:
    - INVALID_CREDENTIALS: email desconocido (mismo mensaje que signin)

Raises:
    NotificationError: si el email no pudo salir. A diferencia del signup,
    acá no hay nada que mostrar sin el email, así que la falla se propaga
    (HTTP 503).
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.repositories import UserCredentialRepository
from .auth_results import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthCommandResult,
    AuthErrorCode,
    auth_error,
)
from .credentials_policy import normalize_email
from .verification_flow import VerificationFlow, VerificationPurpose


@dataclass(frozen=True)
class ForgotPasswordInput:
    email: str


class ForgotPasswordUseCase:
    def __init__(
        self, users: UserCredentialRepository, verification: VerificationFlow
    ) -> None:
        self._users = users
        self._verification = verification

    def execute(self, input_data: ForgotPasswordInput) -> AuthCommandResult:
        email = normalize_email(input_data.email)
        user = self._users.get_user_by_email(email) if email else None
        if user is None:
            return AuthCommandResult(
                error=auth_error(
                    AuthErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
                )
            )

        self._verification.start(user, VerificationPurpose.RESET_PASSWORD)
        return AuthCommandResult(ok=True)
