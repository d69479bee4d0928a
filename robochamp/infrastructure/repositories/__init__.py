"""
============================================================
TARJETA CRC — infrastructure/repositories/__init__.py
============================================================
Module: infrastructure.repositories (Public Export Surface)

Responsibilities:
  - Exponer las implementaciones del credential store en un único import.

Policy:
  - Solo re-exporta símbolos; no debe tener side effects.
============================================================
"""

from .in_memory import InMemoryUserRepository
from .postgres import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "InMemoryUserRepository",
]
