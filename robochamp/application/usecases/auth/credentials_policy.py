"""
Reglas de forma para inputs de auth (email, password, nombre).

Devuelven None si el valor es válido o un mensaje de error humano.
El email se compara tal cual se guardó: solo se recortan espacios externos.
"""

from __future__ import annotations

import re

MAX_EMAIL_CHARS = 320
MAX_PASSWORD_CHARS = 512
MAX_NAME_CHARS = 120

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")


def normalize_email(raw_email: str | None) -> str:
    return (raw_email or "").strip()


def validate_email(email: str) -> str | None:
    if not email:
        return "El email es obligatorio."
    if len(email) > MAX_EMAIL_CHARS or not _EMAIL_PATTERN.match(email):
        return "El email no tiene un formato válido."
    return None


def validate_password(password: str | None, *, field: str = "password") -> str | None:
    if not password:
        return f"El campo '{field}' es obligatorio."
    if len(password) > MAX_PASSWORD_CHARS:
        return f"El campo '{field}' excede {MAX_PASSWORD_CHARS} caracteres."
    return None


def validate_name(name: str | None) -> str | None:
    cleaned = (name or "").strip()
    if not cleaned:
        return "El nombre es obligatorio."
    if len(cleaned) > MAX_NAME_CHARS:
        return f"El nombre excede {MAX_NAME_CHARS} caracteres."
    return None
