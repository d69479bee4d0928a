"""
Name: Password Flow Tests (change / forgot / reset)
"""

import pytest

from robochamp.application.usecases.auth import (
    AuthErrorCode,
    ChangePasswordInput,
    ForgotPasswordInput,
    ForgotPasswordUseCase,
    RefreshSessionInput,
    ResetPasswordInput,
    SignInInput,
)
from robochamp.crosscutting.exceptions import NotificationError

pytestmark = pytest.mark.unit


def _signin(auth, password, email="a@x.com"):
    return auth.signin.execute(SignInInput(email=email, password=password))


# =============================================================================
# Change password
# =============================================================================


def test_change_password_swaps_credentials_and_keeps_session(auth, make_user):
    user = make_user(email="a@x.com", password="old-pw")
    tokens = _signin(auth, "old-pw").tokens

    result = auth.change_password.execute(
        ChangePasswordInput(user_id=user.id, old_password="old-pw", new_password="new-pw")
    )

    assert result.ok is True
    assert _signin(auth, "old-pw").error.code == AuthErrorCode.INVALID_CREDENTIALS
    # La sesión vigente sigue sirviendo.
    refreshed = auth.refresh.execute(
        RefreshSessionInput(user_id=user.id, refresh_token=tokens.refresh_token)
    )
    assert refreshed.error is None
    assert _signin(auth, "new-pw").error is None


def test_change_password_wrong_old_password(auth, make_user):
    user = make_user(email="a@x.com", password="old-pw")

    result = auth.change_password.execute(
        ChangePasswordInput(user_id=user.id, old_password="nope", new_password="new-pw")
    )

    assert result.error.code == AuthErrorCode.ACCESS_DENIED
    assert _signin(auth, "old-pw").error is None


def test_change_password_unknown_user(auth):
    result = auth.change_password.execute(
        ChangePasswordInput(user_id=42, old_password="a", new_password="b")
    )
    assert result.error.code == AuthErrorCode.NOT_FOUND


def test_change_password_requires_new_password(auth, make_user):
    user = make_user(email="a@x.com", password="old-pw")

    result = auth.change_password.execute(
        ChangePasswordInput(user_id=user.id, old_password="old-pw", new_password="")
    )
    assert result.error.code == AuthErrorCode.VALIDATION_ERROR


# =============================================================================
# Forgot password
# =============================================================================


def test_forgot_password_unknown_email(auth, notifier):
    result = auth.forgot_password.execute(ForgotPasswordInput(email="unknown@x.com"))

    assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert notifier.messages == []


def test_forgot_password_stores_new_distinct_token(auth, make_user, users, notifier):
    user = make_user(email="a@x.com")
    auth.forgot_password.execute(ForgotPasswordInput(email="a@x.com"))
    first_hash = users.get_user_by_id(user.id).verification_token_hash

    result = auth.forgot_password.execute(ForgotPasswordInput(email="a@x.com"))

    assert result.ok is True
    second_hash = users.get_user_by_id(user.id).verification_token_hash
    assert second_hash is not None and second_hash != first_hash
    assert "https://robochamp.test/reset-password?token=" in notifier.last.text_body
    assert notifier.last.recipient == "a@x.com"


def test_forgot_password_propagates_delivery_failure(users, failing_verification, make_user):
    make_user(email="a@x.com")
    use_case = ForgotPasswordUseCase(users, failing_verification)

    with pytest.raises(NotificationError):
        use_case.execute(ForgotPasswordInput(email="a@x.com"))


# =============================================================================
# Reset password
# =============================================================================


@pytest.fixture
def reset_token(auth, make_user, notifier):
    make_user(email="a@x.com", password="old-pw")
    auth.forgot_password.execute(ForgotPasswordInput(email="a@x.com"))
    return notifier.last_token()


def test_reset_password_replaces_password(auth, users, reset_token):
    result = auth.reset_password.execute(
        ResetPasswordInput(token=reset_token, new_password="brand-new")
    )

    assert result.ok is True
    assert _signin(auth, "old-pw").error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert _signin(auth, "brand-new").error is None
    assert users.get_user_by_email("a@x.com").verification_token_hash is None


def test_reset_password_with_consumed_token(auth, reset_token):
    auth.reset_password.execute(ResetPasswordInput(token=reset_token, new_password="one"))

    stale = auth.reset_password.execute(
        ResetPasswordInput(token=reset_token, new_password="two")
    )

    assert stale.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN
    assert _signin(auth, "one").error is None


def test_reset_password_with_expired_token(auth, clock, reset_token):
    clock.advance(hours=25)

    result = auth.reset_password.execute(
        ResetPasswordInput(token=reset_token, new_password="brand-new")
    )

    assert result.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN
    assert _signin(auth, "old-pw").error is None


def test_reset_password_validation_keeps_token(auth, reset_token):
    invalid = auth.reset_password.execute(ResetPasswordInput(token=reset_token, new_password=""))
    assert invalid.error.code == AuthErrorCode.VALIDATION_ERROR

    valid = auth.reset_password.execute(
        ResetPasswordInput(token=reset_token, new_password="brand-new")
    )
    assert valid.ok is True


def test_reset_password_does_not_verify_email(auth, make_user, notifier):
    make_user(email="b@x.com", password="old-pw", verified=False)
    auth.forgot_password.execute(ForgotPasswordInput(email="b@x.com"))

    auth.reset_password.execute(
        ResetPasswordInput(token=notifier.last_token(), new_password="brand-new")
    )

    result = _signin(auth, "brand-new", email="b@x.com")
    assert result.error.code == AuthErrorCode.EMAIL_NOT_VERIFIED
