"""
USE CASE: Request Email Verification (re-envío)

Emite un token nuevo para un usuario NO verificado y vuelve a enviar el link.
El token anterior queda invalidado (un solo token pendiente por usuario).

Error Mapping:
    - VALIDATION_ERROR: email mal formado
    - NOT_FOUND: no hay usuario con ese email
    - EMAIL_ALREADY_VERIFIED: el usuario ya verificó
"""

from __future__ import annotations

from dataclasses import dataclass

from ....domain.repositories import UserCredentialRepository
from .auth_results import (
    EMAIL_ALREADY_VERIFIED_MESSAGE,
    USER_NOT_FOUND_MESSAGE,
    AuthErrorCode,
    VerificationRequestResult,
    auth_error,
)
from .credentials_policy import normalize_email, validate_email
from .verification_flow import VerificationFlow, VerificationPurpose


@dataclass(frozen=True)
class RequestEmailVerificationInput:
    email: str


class RequestEmailVerificationUseCase:
    def __init__(
        self, users: UserCredentialRepository, verification: VerificationFlow
    ) -> None:
        self._users = users
        self._verification = verification

    def execute(
        self, input_data: RequestEmailVerificationInput
    ) -> VerificationRequestResult:
        email = normalize_email(input_data.email)
        problem = validate_email(email)
        if problem:
            return VerificationRequestResult(
                error=auth_error(AuthErrorCode.VALIDATION_ERROR, problem)
            )

        user = self._users.get_user_by_email(email)
        if user is None:
            return VerificationRequestResult(
                error=auth_error(AuthErrorCode.NOT_FOUND, USER_NOT_FOUND_MESSAGE)
            )
        if user.email_verified:
            return VerificationRequestResult(
                error=auth_error(
                    AuthErrorCode.EMAIL_ALREADY_VERIFIED, EMAIL_ALREADY_VERIFIED_MESSAGE
                )
            )

        sent = self._verification.start_best_effort(
            user, VerificationPurpose.VERIFY_EMAIL
        )
        return VerificationRequestResult(verification_sent=sent)
