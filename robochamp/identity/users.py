"""
===============================================================================
TARJETA CRC — identity/users.py
===============================================================================

Módulo:
    Modelo de credenciales de Usuario

Responsabilidades:
    - Definir el enum de roles (consumido por autorización, no mutado por auth).
    - Definir el registro de credenciales que leen/escriben los casos de uso
      de autenticación (password, sesión de refresh, verificación por link).
    - Exponer helpers de lectura del sub-estado de verificación.

Colaboradores:
    - application/usecases/auth/*: orquestan el ciclo de vida del registro.
    - infrastructure/repositories/*/user.py: mapean filas -> User.
    - identity/tokens.py: usa id/email/role para los claims.

Notas:
    - Este módulo NO contiene lógica de negocio: solo “shapes” de datos.
    - Los campos de verificación (hash + expiración) se setean y se limpian
      juntos; nunca queda uno sin el otro.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Roles soportados (claim `role` de los JWT)."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True, slots=True)
class User:
    """Registro de credenciales de un usuario."""

    id: int
    email: str
    name: str
    password_hash: str
    role: UserRole = UserRole.USER
    email_verified: bool = False
    refresh_token_hash: str | None = None
    verification_token_hash: str | None = None
    verification_token_expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_active_session(self) -> bool:
        return self.refresh_token_hash is not None

    @property
    def has_pending_verification(self) -> bool:
        return (
            self.verification_token_hash is not None
            and self.verification_token_expires_at is not None
        )

    def verification_expired(self, now: datetime) -> bool:
        """True si no hay verificación pendiente o si su expiración ya pasó."""
        if not self.has_pending_verification:
            return True
        return self.verification_token_expires_at <= now
