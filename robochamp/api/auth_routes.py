"""
===============================================================================
TARJETA CRC — api/auth_routes.py (Autenticación y ciclo de vida de sesión)
===============================================================================
Responsabilidades:
  - Exponer los endpoints de auth: signup, signin, verify-email, re-envío de
    verificación, logout, refresh, change/forgot/reset password.
  - Traducir DTOs HTTP <-> inputs/resultados de los casos de uso.
  - Mapear errores de negocio a RFC 7807 (error_mapping).

Patrones aplicados:
  - Adapter / Presentation Layer: sin lógica de negocio acá.
  - Fail-safe security: access/refresh se validan en dependencias.

Colaboradores:
  - container: factories de casos de uso
  - identity.bearer: require_access_claims / require_refresh_credentials
  - api.error_mapping.raise_auth_error
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..application.usecases.auth import (
    ChangePasswordInput,
    ChangePasswordUseCase,
    ForgotPasswordInput,
    ForgotPasswordUseCase,
    LogoutInput,
    LogoutUseCase,
    RefreshSessionInput,
    RefreshSessionUseCase,
    RequestEmailVerificationInput,
    RequestEmailVerificationUseCase,
    ResetPasswordInput,
    ResetPasswordUseCase,
    SignInInput,
    SignInUseCase,
    SignUpInput,
    SignUpUseCase,
    TokenPairResult,
    VerifyEmailInput,
    VerifyEmailUseCase,
)
from ..container import (
    get_change_password_use_case,
    get_forgot_password_use_case,
    get_logout_use_case,
    get_refresh_session_use_case,
    get_request_email_verification_use_case,
    get_reset_password_use_case,
    get_signin_use_case,
    get_signup_use_case,
    get_verify_email_use_case,
)
from ..crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from ..identity.bearer import (
    RefreshCredentials,
    require_access_claims,
    require_refresh_credentials,
)
from ..identity.tokens import TokenClaims
from .error_mapping import raise_auth_error

router = APIRouter(prefix="/auth", tags=["auth"], responses=OPENAPI_ERROR_RESPONSES)


# -----------------------------------------------------------------------------
# Modelos HTTP (DTOs)
# -----------------------------------------------------------------------------
class _Request(BaseModel):
    # R: Acepta snake_case y camelCase (clientes existentes usan camelCase).
    model_config = ConfigDict(populate_by_name=True)


class SignUpRequest(_Request):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=512)
    name: str = Field(..., max_length=120)


class SignInRequest(_Request):
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=512)


class VerifyEmailRequest(_Request):
    token: str = Field(..., max_length=256)


class EmailRequest(_Request):
    email: str = Field(..., max_length=320)


class ChangePasswordRequest(_Request):
    old_password: str = Field(..., alias="oldPassword", max_length=512)
    new_password: str = Field(..., alias="newPassword", max_length=512)


class ResetPasswordRequest(_Request):
    token: str = Field(..., max_length=256)
    new_password: str = Field(..., alias="newPassword", max_length=512)


class SignUpResponse(BaseModel):
    user_id: int
    verification_sent: bool


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_expires_in: int


class VerificationRequestResponse(BaseModel):
    verification_sent: bool


class OkResponse(BaseModel):
    ok: bool = True


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _token_response(result: TokenPairResult, *, identifier: str = "unknown") -> TokenResponse:
    if result.error is not None:
        raise_auth_error(result.error, identifier=identifier)
    tokens = result.tokens
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_in=tokens.expires_in,
        refresh_expires_in=tokens.refresh_expires_in,
    )


# -----------------------------------------------------------------------------
# Endpoints públicos
# -----------------------------------------------------------------------------
@router.post("/signup", response_model=SignUpResponse, status_code=201)
def signup(
    req: SignUpRequest,
    use_case: SignUpUseCase = Depends(get_signup_use_case),
):
    """Registra un usuario no verificado y envía el link de verificación."""
    result = use_case.execute(
        SignUpInput(email=req.email, password=req.password, name=req.name)
    )
    if result.error is not None:
        raise_auth_error(result.error)
    return SignUpResponse(
        user_id=result.user_id, verification_sent=result.verification_sent
    )


@router.post("/signin", response_model=TokenResponse)
def signin(
    req: SignInRequest,
    use_case: SignInUseCase = Depends(get_signin_use_case),
):
    result = use_case.execute(SignInInput(email=req.email, password=req.password))
    return _token_response(result)


@router.post("/verify-email", response_model=TokenResponse)
def verify_email(
    req: VerifyEmailRequest,
    use_case: VerifyEmailUseCase = Depends(get_verify_email_use_case),
):
    """Consume el token del link y deja al usuario logueado."""
    return _token_response(use_case.execute(VerifyEmailInput(token=req.token)))


@router.post("/request-email-verification", response_model=VerificationRequestResponse)
def request_email_verification(
    req: EmailRequest,
    use_case: RequestEmailVerificationUseCase = Depends(
        get_request_email_verification_use_case
    ),
):
    result = use_case.execute(RequestEmailVerificationInput(email=req.email))
    if result.error is not None:
        raise_auth_error(result.error, identifier=req.email.strip())
    return VerificationRequestResponse(verification_sent=result.verification_sent)


@router.post("/forgot-password", response_model=OkResponse)
def forgot_password(
    req: EmailRequest,
    use_case: ForgotPasswordUseCase = Depends(get_forgot_password_use_case),
):
    result = use_case.execute(ForgotPasswordInput(email=req.email))
    if result.error is not None:
        raise_auth_error(result.error)
    return OkResponse()


@router.post("/reset-password", response_model=OkResponse)
def reset_password(
    req: ResetPasswordRequest,
    use_case: ResetPasswordUseCase = Depends(get_reset_password_use_case),
):
    result = use_case.execute(
        ResetPasswordInput(token=req.token, new_password=req.new_password)
    )
    if result.error is not None:
        raise_auth_error(result.error)
    return OkResponse()


# -----------------------------------------------------------------------------
# Endpoints autenticados
# -----------------------------------------------------------------------------
@router.post("/logout", response_model=OkResponse)
def logout(
    claims: TokenClaims = Depends(require_access_claims()),
    use_case: LogoutUseCase = Depends(get_logout_use_case),
):
    """Idempotente: sin sesión activa también responde ok."""
    use_case.execute(LogoutInput(user_id=claims.user_id))
    return OkResponse()


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    credentials: RefreshCredentials = Depends(require_refresh_credentials()),
    use_case: RefreshSessionUseCase = Depends(get_refresh_session_use_case),
):
    result = use_case.execute(
        RefreshSessionInput(
            user_id=credentials.user_id, refresh_token=credentials.refresh_token
        )
    )
    return _token_response(result, identifier=str(credentials.user_id))


@router.post("/change-password", response_model=OkResponse)
def change_password(
    req: ChangePasswordRequest,
    claims: TokenClaims = Depends(require_access_claims()),
    use_case: ChangePasswordUseCase = Depends(get_change_password_use_case),
):
    result = use_case.execute(
        ChangePasswordInput(
            user_id=claims.user_id,
            old_password=req.old_password,
            new_password=req.new_password,
        )
    )
    if result.error is not None:
        raise_auth_error(result.error, identifier=str(claims.user_id))
    return OkResponse()
