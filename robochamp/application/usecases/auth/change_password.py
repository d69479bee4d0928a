"""
===============================================================================
USE CASE: Change Password
===============================================================================

Business Goal:
    Cambiar el password de un usuario autenticado, exigiendo el password actual.

Notas:
    - La sesión actual NO se invalida (el refresh vigente sigue sirviendo).

Error Mapping:
    - VALIDATION_ERROR: password nuevo vacío / demasiado largo
    - NOT_FOUND: el user_id del access token ya no existe
    - ACCESS_DENIED: el password actual no coincide
===============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ....domain.repositories import UserCredentialRepository
from ....identity.passwords import PasswordHasher
from .auth_results import (
    ACCESS_DENIED_MESSAGE,
    USER_NOT_FOUND_MESSAGE,
    AuthCommandResult,
    AuthErrorCode,
    auth_error,
)
from .credentials_policy import validate_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangePasswordInput:
    user_id: int
    old_password: str
    new_password: str


class ChangePasswordUseCase:
    def __init__(self, users: UserCredentialRepository, hasher: PasswordHasher) -> None:
        self._users = users
        self._hasher = hasher

    def execute(self, input_data: ChangePasswordInput) -> AuthCommandResult:
        problem = validate_password(input_data.new_password, field="newPassword")
        if problem:
            return self._error(AuthErrorCode.VALIDATION_ERROR, problem)

        user = self._users.get_user_by_id(input_data.user_id)
        if user is None:
            return self._error(AuthErrorCode.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

        if not self._hasher.verify(user.password_hash, input_data.old_password or ""):
            return self._error(AuthErrorCode.ACCESS_DENIED, ACCESS_DENIED_MESSAGE)

        updated = self._users.update_password_hash(
            user.id, self._hasher.hash(input_data.new_password)
        )
        if updated is None:
            return self._error(AuthErrorCode.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

        logger.info("Password actualizado", extra={"user_id": user.id})
        return AuthCommandResult(ok=True)

    @staticmethod
    def _error(code: AuthErrorCode, message: str) -> AuthCommandResult:
        return AuthCommandResult(error=auth_error(code, message))
