"""
Name: Email Verification Tests

Responsibilities:
  - Link tokens are single-use and expire (boundary included)
  - Expired tokens are cleared when presented
  - Re-sending a verification invalidates the previous link
  - Message rendering (links, escaping)
"""

import pytest

from robochamp.application.usecases.auth import (
    AuthErrorCode,
    RequestEmailVerificationInput,
    RequestEmailVerificationUseCase,
    SignUpInput,
    VerificationPurpose,
    VerifyEmailInput,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def pending_token(auth, notifier) -> str:
    auth.signup.execute(SignUpInput(email="a@x.com", password="pw1", name="Ana"))
    return notifier.last_token()


def test_verify_marks_user_and_issues_pair(auth, users, signer, pending_token):
    result = auth.verify_email.execute(VerifyEmailInput(token=pending_token))

    assert result.error is None
    assert signer.decode_refresh(result.tokens.refresh_token).user_id == 1

    user = users.get_user_by_id(1)
    assert user.email_verified is True
    assert user.verification_token_hash is None
    assert user.verification_token_expires_at is None
    assert user.refresh_token_hash is not None


def test_token_is_single_use(auth, pending_token):
    first = auth.verify_email.execute(VerifyEmailInput(token=pending_token))
    second = auth.verify_email.execute(VerifyEmailInput(token=pending_token))

    assert first.error is None
    assert second.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN


def test_token_valid_until_just_before_expiry(auth, clock, pending_token):
    clock.advance(hours=24, seconds=-1)

    result = auth.verify_email.execute(VerifyEmailInput(token=pending_token))

    assert result.error is None


def test_expired_token_is_rejected_and_cleared(auth, users, clock, pending_token):
    clock.advance(hours=24)

    result = auth.verify_email.execute(VerifyEmailInput(token=pending_token))

    assert result.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN
    user = users.get_user_by_id(1)
    assert user.email_verified is False
    assert user.verification_token_hash is None
    assert user.verification_token_expires_at is None


@pytest.mark.parametrize("token", ["", "   ", "0" * 64, "deadbeef"])
def test_unknown_token_is_rejected(auth, pending_token, token):
    result = auth.verify_email.execute(VerifyEmailInput(token=token))

    assert result.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN


def test_concurrent_consumption_only_one_wins(verification, pending_token):
    first = verification.claim(pending_token)
    second = verification.claim(pending_token)
    assert first is not None and second is not None

    assert verification.consume(first, mark_verified=True) is not None
    assert verification.consume(second, mark_verified=True) is None


# =============================================================================
# Re-envío de verificación
# =============================================================================


def test_resend_replaces_previous_token(auth, notifier, pending_token):
    result = auth.request_verification.execute(
        RequestEmailVerificationInput(email="a@x.com")
    )
    assert result.error is None
    assert result.verification_sent is True

    new_token = notifier.last_token()
    assert new_token != pending_token

    stale = auth.verify_email.execute(VerifyEmailInput(token=pending_token))
    fresh = auth.verify_email.execute(VerifyEmailInput(token=new_token))

    assert stale.error.code == AuthErrorCode.INVALID_OR_EXPIRED_TOKEN
    assert fresh.error is None


def test_resend_unknown_email(auth):
    result = auth.request_verification.execute(
        RequestEmailVerificationInput(email="ghost@x.com")
    )
    assert result.error.code == AuthErrorCode.NOT_FOUND


def test_resend_already_verified(auth, make_user):
    make_user(email="a@x.com")

    result = auth.request_verification.execute(
        RequestEmailVerificationInput(email="a@x.com")
    )
    assert result.error.code == AuthErrorCode.EMAIL_ALREADY_VERIFIED


def test_resend_reports_delivery_failure(users, failing_verification, make_user):
    make_user(email="a@x.com", verified=False)
    use_case = RequestEmailVerificationUseCase(users, failing_verification)

    result = use_case.execute(RequestEmailVerificationInput(email="a@x.com"))

    assert result.error is None
    assert result.verification_sent is False
    # El token igual quedó emitido.
    assert users.get_user_by_email("a@x.com").verification_token_hash is not None


# =============================================================================
# Render
# =============================================================================


def test_render_escapes_name_in_html(verification, make_user, codes, clock):
    user = make_user(name="<b>Ana</b>", verified=False)
    code = codes.link_token(clock())

    message = verification.render(user, code, VerificationPurpose.RESET_PASSWORD)

    assert "&lt;b&gt;Ana&lt;/b&gt;" in message.html_body
    assert "<b>Ana</b>" not in message.html_body
    assert f"https://robochamp.test/reset-password?token={code.value}" in message.text_body
    assert message.subject == "Restablecé tu contraseña"
