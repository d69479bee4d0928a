"""
===============================================================================
TARJETA CRC — identity/bearer.py
===============================================================================

Módulo:
    Extracción de bearer tokens + dependencias FastAPI

Responsabilidades:
    - Leer `Authorization: Bearer <token>`.
    - require_access_claims(): validar el access token y exponer sus claims.
    - require_refresh_credentials(): validar firma/exp del refresh token y
      entregar (user_id, token en claro) al caso de uso de refresh, que es
      quien decide si es el refresh VIGENTE.

Colaboradores:
    - identity.tokens.TokenSigner (vía container.get_token_signer)
    - crosscutting.error_responses (401 / 403 RFC 7807)

Política de errores:
    - Access ausente o inválido -> 401.
    - Refresh ausente -> 403 ("Refresh token malformed").
    - Refresh con firma inválida o vencido -> 401.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Header, Request

from ..container import get_token_signer
from ..context import bind_user
from ..crosscutting.error_responses import ErrorCode, forbidden, unauthorized
from .tokens import TokenClaims, TokenSigner, TokenVerificationError


@dataclass(frozen=True, slots=True)
class RefreshCredentials:
    user_id: int
    refresh_token: str


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extrae token desde `Authorization: Bearer <token>`."""
    if not authorization:
        return None
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def _unauthorized_for(exc: TokenVerificationError):
    if exc.expired:
        return unauthorized("Token expirado.", code=ErrorCode.INVALID_OR_EXPIRED_TOKEN)
    return unauthorized("Token inválido.")


def require_access_claims() -> Callable:
    """Dependency FastAPI: requiere un access token válido."""

    async def dependency(
        request: Request,
        authorization: str | None = Header(None, alias="Authorization"),
        signer: TokenSigner = Depends(get_token_signer),
    ) -> TokenClaims:
        token = extract_bearer_token(authorization)
        if not token:
            raise unauthorized("Falta token Bearer.")
        try:
            claims = signer.decode_access(token)
        except TokenVerificationError as exc:
            raise _unauthorized_for(exc) from exc

        request.state.user_id = claims.user_id
        bind_user(claims.user_id)
        return claims

    return dependency


def require_refresh_credentials() -> Callable:
    """Dependency FastAPI: requiere un refresh token bien firmado y no vencido."""

    async def dependency(
        authorization: str | None = Header(None, alias="Authorization"),
        signer: TokenSigner = Depends(get_token_signer),
    ) -> RefreshCredentials:
        token = extract_bearer_token(authorization)
        if not token:
            raise forbidden("Refresh token malformed")
        try:
            claims = signer.decode_refresh(token)
        except TokenVerificationError as exc:
            raise _unauthorized_for(exc) from exc

        return RefreshCredentials(user_id=claims.user_id, refresh_token=token)

    return dependency
