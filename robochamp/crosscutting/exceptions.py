"""
===============================================================================
MÓDULO: Excepciones tipadas del backend (errores de infraestructura)
===============================================================================

Objetivo
--------
Los errores de negocio del core de auth viajan como resultados tipados
(AuthError). Acá viven SOLO los errores que se propagan como excepción:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  RoboChampError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure.repositories.* / infrastructure.notifications.*
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class RoboChampError(Exception):
    """Base para errores internos del sistema (error_code + error_id + message)."""

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(RoboChampError):
    """Errores de DB (conexión, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateEmailError(DatabaseError):
    """Violación de unicidad de email al crear usuario (carrera entre dos signups)."""

    error_code: str = "DUPLICATE_EMAIL"


class NotificationError(RoboChampError):
    """Falla al entregar un email (proveedor caído, respuesta no-2xx, config)."""

    error_code: str = "NOTIFICATION_ERROR"
