"""
===============================================================================
TARJETA CRC — identity/verification.py
===============================================================================

Módulo:
    Generador de códigos de verificación

Responsabilidades:
    - Generar un código numérico de 6 dígitos (OTP) con expiración corta.
    - Generar un token opaco (link de verificación / reset) con expiración larga.
    - Calcular el digest SHA-256 con el que se persiste y se busca el token.

Colaboradores:
    - secrets / hashlib (stdlib, CSPRNG)
    - application/usecases/auth/verification_flow.py

Notas:
    - El valor en claro solo viaja en el email; en storage vive el digest.
===============================================================================
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

OTP_MIN: int = 100_000
OTP_MAX: int = 999_999
LINK_TOKEN_BYTES: int = 32

DEFAULT_OTP_TTL = timedelta(minutes=5)
DEFAULT_LINK_TTL = timedelta(hours=24)


@dataclass(frozen=True, slots=True)
class VerificationCode:
    """Código/token emitido + instante de expiración."""

    value: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class VerificationCodeGenerator:
    def __init__(
        self,
        *,
        otp_ttl: timedelta = DEFAULT_OTP_TTL,
        link_ttl: timedelta = DEFAULT_LINK_TTL,
    ) -> None:
        self._otp_ttl = otp_ttl
        self._link_ttl = link_ttl

    def numeric_code(self, now: datetime) -> VerificationCode:
        """OTP uniforme en [100000, 999999]."""
        value = OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1)
        return VerificationCode(value=str(value), expires_at=now + self._otp_ttl)

    def link_token(self, now: datetime) -> VerificationCode:
        """Token opaco de 32 bytes aleatorios renderizado en hex (64 chars)."""
        return VerificationCode(
            value=secrets.token_hex(LINK_TOKEN_BYTES),
            expires_at=now + self._link_ttl,
        )

    @staticmethod
    def digest(value: str) -> str:
        """SHA-256 hex del valor en claro (para storage y look-up)."""
        return hashlib.sha256(value.encode("utf-8")).hexdigest()
