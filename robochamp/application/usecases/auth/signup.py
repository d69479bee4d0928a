"""
===============================================================================
USE CASE: Sign Up
===============================================================================

Name:
    Sign Up Use Case

Business Goal:
    Registrar un usuario nuevo (email + password + nombre) en estado
    "no verificado" y enviarle el link de verificación.

Why (Context / Intención):
    - El email es la identidad: no puede haber dos cuentas con el mismo.
    - El password nunca se guarda en claro (argon2id).
    - Si el email de verificación no sale, el alta NO se revierte: el usuario
      puede pedir un re-envío (request-email-verification).

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    SignUpUseCase

Responsibilities:
    - Validar forma de email/password/nombre.
    - Rechazar emails ya registrados (CONFLICT_IDENTITY), incluso si la
      carrera se pierde contra otro signup (DuplicateEmailError).
    - Persistir el usuario con el hash del password.
    - Disparar la verificación (best-effort).

Collaborators:
    - UserCredentialRepository
    - PasswordHasher
    - VerificationFlow

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    SignUpInput(email, password, name)

Outputs:
    SignUpResult(user_id, verification_sent, error)

Error Mapping:
    - VALIDATION_ERROR: email/password/nombre inválidos
    - CONFLICT_IDENTITY: email ya registrado
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....crosscutting.exceptions import DuplicateEmailError
from ....domain.repositories import UserCredentialRepository
from ....identity.passwords import PasswordHasher
from .auth_results import (
    CONFLICT_IDENTITY_MESSAGE,
    AuthErrorCode,
    SignUpResult,
    auth_error,
)
from .credentials_policy import (
    normalize_email,
    validate_email,
    validate_name,
    validate_password,
)
from .verification_flow import VerificationFlow, VerificationPurpose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignUpInput:
    email: str
    password: str
    name: str


class SignUpUseCase:
    def __init__(
        self,
        users: UserCredentialRepository,
        hasher: PasswordHasher,
        verification: VerificationFlow,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._verification = verification

    def execute(self, input_data: SignUpInput) -> SignUpResult:
        email = normalize_email(input_data.email)
        problem = (
            validate_email(email)
            or validate_password(input_data.password)
            or validate_name(input_data.name)
        )
        if problem:
            return SignUpResult(error=auth_error(AuthErrorCode.VALIDATION_ERROR, problem))

        if self._users.get_user_by_email(email) is not None:
            return self._conflict()

        try:
            user = self._users.create_user(
                email=email,
                name=input_data.name.strip(),
                password_hash=self._hasher.hash(input_data.password),
            )
        except DuplicateEmailError:
            # Otro signup con el mismo email ganó entre el look-up y el INSERT.
            return self._conflict()

        logger.info("Usuario registrado", extra={"user_id": user.id})

        sent = self._verification.start_best_effort(
            user, VerificationPurpose.VERIFY_EMAIL
        )
        return SignUpResult(user_id=user.id, verification_sent=sent)

    @staticmethod
    def _conflict() -> SignUpResult:
        return SignUpResult(
            error=auth_error(AuthErrorCode.CONFLICT_IDENTITY, CONFLICT_IDENTITY_MESSAGE)
        )
