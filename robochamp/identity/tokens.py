"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Firmador de tokens de sesión (JWT access + refresh)

Responsabilidades:
    - Emitir el par access/refresh firmado, cada uno con secreto y TTL propios.
    - Decodificar y validar cada clase de token (firma, exp, typ, claims mínimos).
    - Exponer claims tipados (TokenClaims) a la capa HTTP.

Colaboradores:
    - PyJWT (HS256)
    - identity.auth_settings.AuthSettings (secretos / TTLs)
    - identity.users.User / UserRole
    - crosscutting.clock (tiempo inyectable)

Decisiones de diseño:
    - Claims: sub, email, role, iat, exp, typ, jti.
    - jti aleatorio: dos pares emitidos en el mismo segundo son distintos,
      así la rotación de refresh siempre invalida el token anterior.
    - La expiración se valida contra el Clock inyectado (no contra time.time()).
    - No loguear tokens ni secretos.
===============================================================================
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime

import jwt

from ..crosscutting.clock import Clock, utc_now
from .auth_settings import AuthSettings
from .users import User, UserRole

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLE: str = "role"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_TYP: str = "typ"
CLAIM_JTI: str = "jti"

TOKEN_TYPE_ACCESS: str = "access"
TOKEN_TYPE_REFRESH: str = "refresh"

_REQUIRED_CLAIMS = [CLAIM_SUB, CLAIM_EMAIL, CLAIM_ROLE, CLAIM_EXP, CLAIM_TYP]


class TokenVerificationError(Exception):
    """Token inválido (firma, formato, claims) o expirado."""

    def __init__(self, message: str, *, expired: bool = False) -> None:
        super().__init__(message)
        self.expired = expired


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    refresh_expires_in: int
    token_type: str = "bearer"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Claims validados de un access o refresh token."""

    user_id: int
    email: str
    role: UserRole
    token_type: str
    issued_at: datetime
    expires_at: datetime


class TokenSigner:
    """Emite y verifica tokens bearer firmados (HS256)."""

    def __init__(self, settings: AuthSettings, clock: Clock = utc_now) -> None:
        self._settings = settings
        self._clock = clock

    # ------------------------------------------------------------------
    # Emisión
    # ------------------------------------------------------------------
    def issue_pair(self, user: User) -> TokenPair:
        now = self._clock()
        access = self._sign(
            user,
            token_type=TOKEN_TYPE_ACCESS,
            secret=self._settings.access_secret,
            ttl_seconds=self._settings.access_ttl_seconds,
            now=now,
        )
        refresh = self._sign(
            user,
            token_type=TOKEN_TYPE_REFRESH,
            secret=self._settings.refresh_secret,
            ttl_seconds=self._settings.refresh_ttl_seconds,
            now=now,
        )
        return TokenPair(
            access_token=access,
            refresh_token=refresh,
            expires_in=self._settings.access_ttl_seconds,
            refresh_expires_in=self._settings.refresh_ttl_seconds,
        )

    def _sign(
        self,
        user: User,
        *,
        token_type: str,
        secret: str,
        ttl_seconds: int,
        now: datetime,
    ) -> str:
        issued_at = int(now.timestamp())
        payload: dict[str, object] = {
            CLAIM_SUB: str(user.id),
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: user.role.value,
            CLAIM_IAT: issued_at,
            CLAIM_EXP: issued_at + ttl_seconds,
            CLAIM_TYP: token_type,
            CLAIM_JTI: secrets.token_hex(16),
        }
        return jwt.encode(payload, secret, algorithm=self._settings.algorithm)

    # ------------------------------------------------------------------
    # Verificación
    # ------------------------------------------------------------------
    def decode_access(self, token: str) -> TokenClaims:
        return self._decode(
            token, secret=self._settings.access_secret, token_type=TOKEN_TYPE_ACCESS
        )

    def decode_refresh(self, token: str) -> TokenClaims:
        return self._decode(
            token, secret=self._settings.refresh_secret, token_type=TOKEN_TYPE_REFRESH
        )

    def _decode(self, token: str, *, secret: str, token_type: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self._settings.algorithm],
                options={
                    "require": _REQUIRED_CLAIMS,
                    # R: exp/iat se validan contra el Clock inyectado (abajo).
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenVerificationError("Token inválido.") from exc

        if payload.get(CLAIM_TYP) != token_type:
            raise TokenVerificationError("Tipo de token inválido.")

        try:
            expires_at = int(payload[CLAIM_EXP])
            issued_at = int(payload.get(CLAIM_IAT, 0))
            user_id = int(payload[CLAIM_SUB])
            role = UserRole(str(payload[CLAIM_ROLE]))
        except (TypeError, ValueError) as exc:
            raise TokenVerificationError("Token inválido.") from exc

        now = self._clock()
        if expires_at <= int(now.timestamp()):
            raise TokenVerificationError("Token expirado.", expired=True)

        tz = now.tzinfo
        return TokenClaims(
            user_id=user_id,
            email=str(payload[CLAIM_EMAIL]),
            role=role,
            token_type=token_type,
            issued_at=datetime.fromtimestamp(issued_at, tz=tz),
            expires_at=datetime.fromtimestamp(expires_at, tz=tz),
        )
