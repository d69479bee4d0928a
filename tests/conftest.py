"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (APP_ENV=test, no .env file, strong secrets)
  - Provide fakes: controllable clock, recording / failing notifiers
  - Wire the auth core with an in-memory store and cheap Argon2 parameters

Notes:
  - Environment variables are set BEFORE importing robochamp: the logger reads
    Settings at import time.
"""

import os
import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("MAIL_MODE", "console")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef-xyz")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-0123456789abcdef-xyz")

from robochamp.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from robochamp.application.usecases.auth import (  # noqa: E402
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
from robochamp.crosscutting.exceptions import NotificationError  # noqa: E402
from robochamp.domain.services import EmailMessage  # noqa: E402
from robochamp.identity.auth_settings import AuthSettings  # noqa: E402
from robochamp.identity.passwords import PasswordHasher  # noqa: E402
from robochamp.identity.tokens import TokenSigner  # noqa: E402
from robochamp.identity.users import User  # noqa: E402
from robochamp.identity.verification import VerificationCodeGenerator  # noqa: E402
from robochamp.infrastructure.repositories import InMemoryUserRepository  # noqa: E402

FRONTEND_URL = "https://robochamp.test"
ACCESS_SECRET = "unit-access-secret-aaaaaaaaaaaaaaaaaaaaaaaa"
REFRESH_SECRET = "unit-refresh-secret-bbbbbbbbbbbbbbbbbbbbbbbb"

_TOKEN_IN_LINK = re.compile(r"token=([0-9a-f]+)")


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Fakes
# ============================================================================


class FakeClock:
    """Reloj controlable (UTC)."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


class RecordingNotifier:
    """Guarda los mensajes en memoria en lugar de enviarlos."""

    def __init__(self) -> None:
        self.messages: List[EmailMessage] = []

    def send(self, message: EmailMessage) -> None:
        self.messages.append(message)

    @property
    def last(self) -> EmailMessage:
        return self.messages[-1]

    def last_token(self) -> str:
        match = _TOKEN_IN_LINK.search(self.last.text_body)
        assert match, "no link token in last message"
        return match.group(1)


class FailingNotifier:
    def __init__(self) -> None:
        self.attempts = 0

    def send(self, message: EmailMessage) -> None:
        self.attempts += 1
        raise NotificationError("smtp down")


# ============================================================================
# Auth core wiring
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(
        access_secret=ACCESS_SECRET,
        access_ttl_seconds=15 * 60,
        refresh_secret=REFRESH_SECRET,
        refresh_ttl_seconds=7 * 24 * 60 * 60,
        frontend_url=FRONTEND_URL,
    )


@pytest.fixture
def users(clock) -> InMemoryUserRepository:
    return InMemoryUserRepository(clock=clock)


@pytest.fixture
def signer(auth_settings, clock) -> TokenSigner:
    return TokenSigner(auth_settings, clock=clock)


@pytest.fixture
def codes() -> VerificationCodeGenerator:
    return VerificationCodeGenerator()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sessions(users, hasher, signer) -> SessionTokenService:
    return SessionTokenService(users, hasher, signer)


@pytest.fixture
def verification(users, codes, notifier, clock) -> VerificationFlow:
    return VerificationFlow(
        users, codes, notifier, frontend_url=FRONTEND_URL, clock=clock
    )


@pytest.fixture
def make_user(users, hasher, codes, clock):
    """Factory: crea un usuario (verificado por defecto) directo en el store."""

    def _make(
        email: str = "ana@robochamp.test",
        password: str = "s3cret-pass",
        name: str = "Ana",
        verified: bool = True,
    ) -> User:
        user = users.create_user(
            email=email, name=name, password_hash=hasher.hash(password)
        )
        if not verified:
            return user
        token_hash = codes.digest(f"seed-{user.id}")
        users.set_verification_token(
            user.id, token_hash=token_hash, expires_at=clock() + timedelta(hours=1)
        )
        return users.consume_verification_token(
            user.id, token_hash=token_hash, now=clock(), mark_verified=True
        )

    return _make


@pytest.fixture
def auth(users, hasher, sessions, verification) -> SimpleNamespace:
    """Los nueve casos de uso cableados sobre los mismos fakes."""
    return SimpleNamespace(
        signup=SignUpUseCase(users, hasher, verification),
        signin=SignInUseCase(users, hasher, sessions),
        verify_email=VerifyEmailUseCase(verification, sessions),
        request_verification=RequestEmailVerificationUseCase(users, verification),
        logout=LogoutUseCase(sessions),
        refresh=RefreshSessionUseCase(users, sessions),
        change_password=ChangePasswordUseCase(users, hasher),
        forgot_password=ForgotPasswordUseCase(users, verification),
        reset_password=ResetPasswordUseCase(verification, hasher),
    )


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def failing_verification(users, codes, failing_notifier, clock) -> VerificationFlow:
    return VerificationFlow(
        users, codes, failing_notifier, frontend_url=FRONTEND_URL, clock=clock
    )
