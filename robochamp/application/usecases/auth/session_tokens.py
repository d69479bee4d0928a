"""
===============================================================================
SESSION TOKENS (Refresh-token lifecycle)
===============================================================================

Name:
    SessionTokenService

Business Goal:
    Mantener a lo sumo UNA sesión activa por usuario: cada emisión reemplaza
    el hash de refresh guardado y cada refresh exitoso lo rota.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    SessionTokenService

Responsibilities:
    - Emitir un par access/refresh y persistir el hash argon2 del refresh.
    - Validar un refresh presentado contra el hash guardado.
    - Rotar con compare-and-set (dos refresh concurrentes con el mismo token:
      gana uno, el otro recibe None).
    - Terminar la sesión (limpiar el hash).

Collaborators:
    - UserCredentialRepository
    - identity.passwords.PasswordHasher (hash del refresh)
    - identity.tokens.TokenSigner
===============================================================================
"""

from __future__ import annotations

import logging

from ....domain.repositories import UserCredentialRepository
from ....identity.passwords import PasswordHasher
from ....identity.tokens import TokenPair, TokenSigner
from ....identity.users import User

logger = logging.getLogger(__name__)


class SessionTokenService:
    def __init__(
        self,
        users: UserCredentialRepository,
        hasher: PasswordHasher,
        signer: TokenSigner,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._signer = signer

    def start_session(self, user: User) -> TokenPair:
        """Emite un par nuevo; el refresh anterior (si había) deja de servir."""
        pair = self._signer.issue_pair(user)
        self._users.set_refresh_token_hash(user.id, self._hasher.hash(pair.refresh_token))
        return pair

    def matches_current(self, user: User, refresh_token: str) -> bool:
        if user.refresh_token_hash is None:
            return False
        return self._hasher.verify(user.refresh_token_hash, refresh_token)

    def rotate(self, user: User, refresh_token: str) -> TokenPair | None:
        """
        Rota la sesión si refresh_token es el vigente.

        Returns:
            Par nuevo, o None si el token no coincide o perdió la carrera.
        """
        if not self.matches_current(user, refresh_token):
            return None

        pair = self._signer.issue_pair(user)
        rotated = self._users.compare_and_set_refresh_token_hash(
            user.id,
            expected_hash=user.refresh_token_hash or "",
            new_hash=self._hasher.hash(pair.refresh_token),
        )
        if not rotated:
            logger.warning(
                "Refresh rechazado: la sesión cambió durante la rotación",
                extra={"user_id": user.id},
            )
            return None
        return pair

    def end_session(self, user_id: int) -> bool:
        return self._users.clear_refresh_token_hash(user_id)
