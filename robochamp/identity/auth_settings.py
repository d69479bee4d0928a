"""
===============================================================================
TARJETA CRC — identity/auth_settings.py
===============================================================================

Responsabilidades:
    - Resolver UNA vez la configuración de auth (secretos, TTLs, URL de links)
      a un snapshot tipado e inmutable.
    - Evitar lookups por string key dentro de los casos de uso.

Colaboradores:
    - crosscutting.config.get_settings
    - identity/tokens.py, identity/verification.py
    - application/usecases/auth/verification_flow.py (frontend_url)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ..crosscutting.config import Settings, get_settings

JWT_ALGORITHM: str = "HS256"


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """Settings de auth (snapshot)."""

    access_secret: str
    access_ttl_seconds: int
    refresh_secret: str
    refresh_ttl_seconds: int
    verification_token_ttl_seconds: int = 24 * 60 * 60
    otp_ttl_seconds: int = 5 * 60
    frontend_url: str = "http://localhost:3000"
    algorithm: str = JWT_ALGORITHM


def auth_settings_from(settings: Settings) -> AuthSettings:
    return AuthSettings(
        access_secret=settings.jwt_access_secret,
        access_ttl_seconds=settings.jwt_access_ttl_minutes * 60,
        refresh_secret=settings.jwt_refresh_secret,
        refresh_ttl_seconds=settings.jwt_refresh_ttl_minutes * 60,
        verification_token_ttl_seconds=settings.verification_token_ttl_hours * 3600,
        otp_ttl_seconds=settings.otp_ttl_minutes * 60,
        frontend_url=settings.frontend_url,
    )


def get_auth_settings() -> AuthSettings:
    """Construye un snapshot de settings de auth desde el singleton Settings."""
    return auth_settings_from(get_settings())
