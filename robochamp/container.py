"""
===============================================================================
TARJETA CRC — robochamp/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias del Auth Core (credential store, hasher, firmador,
    generador de tokens, notifier) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con lru_cache para recursos compartidos.
  - Decidir adapters según Settings:
      * app_env de test o sin DATABASE_URL -> InMemoryUserRepository
      * mail_mode -> ConsoleNotifier / ResendNotifier

Colaboradores:
  - crosscutting.config.get_settings
  - identity.* (hasher, signer, generador)
  - infrastructure.* (implementaciones)
  - application.usecases.auth (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio ni depende de FastAPI.
  - reset_container() limpia los singletons (tests / recarga de settings).
===============================================================================
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from .application.usecases.auth import (
    ChangePasswordUseCase,
    ForgotPasswordUseCase,
    LogoutUseCase,
    RefreshSessionUseCase,
    RequestEmailVerificationUseCase,
    ResetPasswordUseCase,
    SessionTokenService,
    SignInUseCase,
    SignUpUseCase,
    VerificationFlow,
    VerifyEmailUseCase,
)
from .crosscutting.clock import Clock, utc_now
from .crosscutting.config import get_settings
from .domain.repositories import UserCredentialRepository
from .domain.services import Notifier
from .identity.auth_settings import AuthSettings, get_auth_settings
from .identity.passwords import PasswordHasher
from .identity.tokens import TokenSigner
from .identity.verification import VerificationCodeGenerator
from .infrastructure.notifications import ConsoleNotifier, ResendNotifier
from .infrastructure.repositories import InMemoryUserRepository, PostgresUserRepository

# =============================================================================
# Helpers internos
# =============================================================================


def uses_postgres() -> bool:
    """
    Regla:
      - app_env ∈ {"test", "testing", "ci"} => in-memory.
      - Sin DATABASE_URL (dev local) => in-memory.
    """
    settings = get_settings()
    return not settings.is_test() and bool(settings.database_url.strip())


def get_clock() -> Clock:
    return utc_now


# =============================================================================
# Identity (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_auth_settings_snapshot() -> AuthSettings:
    return get_auth_settings()


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache(maxsize=1)
def get_token_signer() -> TokenSigner:
    return TokenSigner(get_auth_settings_snapshot(), clock=get_clock())


@lru_cache(maxsize=1)
def get_verification_code_generator() -> VerificationCodeGenerator:
    settings = get_auth_settings_snapshot()
    return VerificationCodeGenerator(
        otp_ttl=timedelta(seconds=settings.otp_ttl_seconds),
        link_ttl=timedelta(seconds=settings.verification_token_ttl_seconds),
    )


# =============================================================================
# Adapters (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserCredentialRepository:
    """Credential store (in-memory en test / sin DB; Postgres en runtime)."""
    if uses_postgres():
        return PostgresUserRepository()
    return InMemoryUserRepository(clock=get_clock())


@lru_cache(maxsize=1)
def get_notifier() -> Notifier:
    settings = get_settings()
    if settings.mail_mode == "resend":
        return ResendNotifier(
            settings.resend_api_key,
            sender=f"{settings.mail_sender_name} <{settings.mail_sender_address}>",
            api_url=settings.resend_api_url,
            timeout_seconds=settings.mail_timeout_seconds,
        )
    # El cuerpo lleva el link con el token: fuera de prod solamente.
    return ConsoleNotifier(include_body=not settings.is_production())


# =============================================================================
# Servicios compartidos de auth
# =============================================================================


def get_session_token_service() -> SessionTokenService:
    return SessionTokenService(
        get_user_repository(), get_password_hasher(), get_token_signer()
    )


def get_verification_flow() -> VerificationFlow:
    return VerificationFlow(
        get_user_repository(),
        get_verification_code_generator(),
        get_notifier(),
        frontend_url=get_auth_settings_snapshot().frontend_url,
        clock=get_clock(),
    )


# =============================================================================
# Casos de uso
# =============================================================================


def get_signup_use_case() -> SignUpUseCase:
    return SignUpUseCase(
        get_user_repository(), get_password_hasher(), get_verification_flow()
    )


def get_signin_use_case() -> SignInUseCase:
    return SignInUseCase(
        get_user_repository(), get_password_hasher(), get_session_token_service()
    )


def get_verify_email_use_case() -> VerifyEmailUseCase:
    return VerifyEmailUseCase(get_verification_flow(), get_session_token_service())


def get_request_email_verification_use_case() -> RequestEmailVerificationUseCase:
    return RequestEmailVerificationUseCase(get_user_repository(), get_verification_flow())


def get_logout_use_case() -> LogoutUseCase:
    return LogoutUseCase(get_session_token_service())


def get_refresh_session_use_case() -> RefreshSessionUseCase:
    return RefreshSessionUseCase(get_user_repository(), get_session_token_service())


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(get_user_repository(), get_password_hasher())


def get_forgot_password_use_case() -> ForgotPasswordUseCase:
    return ForgotPasswordUseCase(get_user_repository(), get_verification_flow())


def get_reset_password_use_case() -> ResetPasswordUseCase:
    return ResetPasswordUseCase(get_verification_flow(), get_password_hasher())


def reset_container() -> None:
    """Limpia los singletons (incluye Settings)."""
    for factory in (
        get_auth_settings_snapshot,
        get_password_hasher,
        get_token_signer,
        get_verification_code_generator,
        get_user_repository,
        get_notifier,
        get_settings,
    ):
        factory.cache_clear()
