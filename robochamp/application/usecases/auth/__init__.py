"""
===============================================================================
AUTH USE CASES PACKAGE (Public API / Exports)
===============================================================================

Business Goal:
    Punto único de importación para los casos de uso de autenticación y
    ciclo de vida de sesión, sus DTOs y resultados.

-------------------------------------------------------------------------------
CRC CARD (Module-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Component:
    auth usecases package (__init__.py)

Responsibilities:
    - Re-exportar casos de uso: signup, signin, verify-email, re-envío de
      verificación, logout, refresh, change/forgot/reset password.
    - Re-exportar helpers compartidos (SessionTokenService, VerificationFlow).
    - Re-exportar resultados y códigos de error.

Collaborators:
    - api/auth_routes.py y container.py (consumidores)
===============================================================================
"""

from .auth_results import (
    AuthCommandResult,
    AuthError,
    AuthErrorCode,
    SignUpResult,
    TokenPairResult,
    VerificationRequestResult,
)
from .change_password import ChangePasswordInput, ChangePasswordUseCase
from .forgot_password import ForgotPasswordInput, ForgotPasswordUseCase
from .logout import LogoutInput, LogoutUseCase
from .refresh_session import RefreshSessionInput, RefreshSessionUseCase
from .request_email_verification import (
    RequestEmailVerificationInput,
    RequestEmailVerificationUseCase,
)
from .reset_password import ResetPasswordInput, ResetPasswordUseCase
from .session_tokens import SessionTokenService
from .signin import SignInInput, SignInUseCase
from .signup import SignUpInput, SignUpUseCase
from .verification_flow import PendingVerification, VerificationFlow, VerificationPurpose
from .verify_email import VerifyEmailInput, VerifyEmailUseCase

__all__ = [
    # Results
    "AuthCommandResult",
    "AuthError",
    "AuthErrorCode",
    "SignUpResult",
    "TokenPairResult",
    "VerificationRequestResult",
    # Shared services
    "SessionTokenService",
    "VerificationFlow",
    "VerificationPurpose",
    "PendingVerification",
    # Use cases
    "SignUpInput",
    "SignUpUseCase",
    "SignInInput",
    "SignInUseCase",
    "VerifyEmailInput",
    "VerifyEmailUseCase",
    "RequestEmailVerificationInput",
    "RequestEmailVerificationUseCase",
    "LogoutInput",
    "LogoutUseCase",
    "RefreshSessionInput",
    "RefreshSessionUseCase",
    "ChangePasswordInput",
    "ChangePasswordUseCase",
    "ForgotPasswordInput",
    "ForgotPasswordUseCase",
    "ResetPasswordInput",
    "ResetPasswordUseCase",
]
