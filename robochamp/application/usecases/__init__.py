"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
└── auth/       # Signup, signin, verification, sessions, password flows

Usage
-----
    from robochamp.application.usecases.auth import SignUpUseCase, SignUpInput
"""

from .auth import (
    AuthCommandResult,
    AuthError,
    AuthErrorCode,
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
    SignUpResult,
    SignUpUseCase,
    TokenPairResult,
    VerificationRequestResult,
    VerifyEmailInput,
    VerifyEmailUseCase,
)

__all__ = [
    "AuthCommandResult",
    "AuthError",
    "AuthErrorCode",
    "ChangePasswordInput",
    "ChangePasswordUseCase",
    "ForgotPasswordInput",
    "ForgotPasswordUseCase",
    "LogoutInput",
    "LogoutUseCase",
    "RefreshSessionInput",
    "RefreshSessionUseCase",
    "RequestEmailVerificationInput",
    "RequestEmailVerificationUseCase",
    "ResetPasswordInput",
    "ResetPasswordUseCase",
    "SignInInput",
    "SignInUseCase",
    "SignUpInput",
    "SignUpResult",
    "SignUpUseCase",
    "TokenPairResult",
    "VerificationRequestResult",
    "VerifyEmailInput",
    "VerifyEmailUseCase",
]
