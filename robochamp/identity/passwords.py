"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Hasher de secretos (Argon2id)

Responsabilidades:
    - Hashear passwords y refresh tokens con un KDF memory-hard.
    - Verificar un secreto contra su hash usando la comparación en tiempo
      constante de argon2 (nunca igualdad de strings).
    - Indicar si un hash quedó con parámetros viejos (needs_rehash).

Colaboradores:
    - argon2-cffi (PasswordHasher)
    - application/usecases/auth/*: passwords y hash de refresh token

Notas:
    - verify() devuelve False ante mismatch, hash vacío o hash corrupto;
      cualquier otra falla del primitive se propaga.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher as Argon2PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordHasher:
    """Wrapper fino sobre argon2 con parámetros inyectables (tests usan costos bajos)."""

    def __init__(
        self,
        *,
        time_cost: int | None = None,
        memory_cost: int | None = None,
        parallelism: int | None = None,
    ) -> None:
        params = {
            key: value
            for key, value in (
                ("time_cost", time_cost),
                ("memory_cost", memory_cost),
                ("parallelism", parallelism),
            )
            if value is not None
        }
        self._hasher = Argon2PasswordHasher(**params)

    def hash(self, secret: str) -> str:
        """Hashea un secreto usando Argon2id (salt aleatorio por hash)."""
        return self._hasher.hash(secret)

    def verify(self, secret_hash: str | None, secret: str) -> bool:
        """Verifica secreto vs hash almacenado."""
        if not secret_hash:
            return False
        try:
            return self._hasher.verify(secret_hash, secret)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, secret_hash: str) -> bool:
        return self._hasher.check_needs_rehash(secret_hash)
