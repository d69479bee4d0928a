"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Componente:
  Errores tipados del pool de conexiones

Responsabilidades:
  - Distinguir "pool no inicializado" de "pool inicializado dos veces".
  - Heredar de DatabaseError: la capa HTTP los traduce a 503 sin casos especiales.
===============================================================================
"""

from ...crosscutting.exceptions import DatabaseError


class DatabasePoolError(DatabaseError):
    """Base de errores del pool."""

    error_code: str = "DATABASE_POOL_ERROR"


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() llamado con un pool ya abierto."""


class PoolNotInitializedError(DatabasePoolError):
    """get_pool() llamado antes de init_pool()."""
