"""
Name: Signup / Signin Use Case Tests

Responsibilities:
  - Signup creates exactly one unverified user per email and sends the link
  - Signin distinguishes INVALID_CREDENTIALS from EMAIL_NOT_VERIFIED
  - Full scenario: signup -> blocked signin -> verify -> signin
"""

import pytest

from robochamp.application.usecases.auth import (
    AuthErrorCode,
    SignInInput,
    SignUpInput,
    SignUpUseCase,
    VerifyEmailInput,
)
from robochamp.crosscutting.exceptions import DuplicateEmailError

pytestmark = pytest.mark.unit

FRONTEND_URL = "https://robochamp.test"


def _signup(auth, email="a@x.com", password="pw1", name="Ana"):
    return auth.signup.execute(SignUpInput(email=email, password=password, name=name))


# =============================================================================
# Signup
# =============================================================================


def test_signup_creates_unverified_user_and_sends_link(auth, users, notifier, codes):
    result = _signup(auth)

    assert result.error is None
    assert result.user_id == 1
    assert result.verification_sent is True

    user = users.get_user_by_id(1)
    assert user.email == "a@x.com"
    assert user.name == "Ana"
    assert user.email_verified is False
    assert user.refresh_token_hash is None
    assert user.password_hash != "pw1"

    message = notifier.last
    assert message.recipient == "a@x.com"
    assert f"{FRONTEND_URL}/verify-email?token=" in message.text_body
    token = notifier.last_token()
    assert token in message.html_body
    # En storage vive el digest, no el token en claro.
    assert user.verification_token_hash == codes.digest(token)
    assert user.verification_token_hash != token


def test_signup_same_email_twice_conflicts(auth, users):
    assert _signup(auth).error is None

    second = _signup(auth, password="other", name="Otra")

    assert second.error.code == AuthErrorCode.CONFLICT_IDENTITY
    assert second.user_id is None
    assert users.get_user_by_id(2) is None


def test_signup_lost_race_maps_to_conflict(users, hasher, verification):
    class RacingRepository:
        def __getattr__(self, name):
            return getattr(users, name)

        def get_user_by_email(self, email):
            return None

        def create_user(self, **kwargs):
            raise DuplicateEmailError("Email already registered")

    use_case = SignUpUseCase(RacingRepository(), hasher, verification)
    result = use_case.execute(SignUpInput(email="a@x.com", password="pw1", name="Ana"))

    assert result.error.code == AuthErrorCode.CONFLICT_IDENTITY


def test_signup_trims_email_but_keeps_case(auth, users):
    result = _signup(auth, email="  Ana@X.com ")

    assert result.error is None
    assert users.get_user_by_email("Ana@X.com") is not None
    assert users.get_user_by_email("ana@x.com") is None


@pytest.mark.parametrize(
    "email,password,name",
    [
        ("", "pw1", "Ana"),
        ("not-an-email", "pw1", "Ana"),
        ("a@x.com", "", "Ana"),
        ("a@x.com", "pw1", "   "),
    ],
)
def test_signup_rejects_malformed_input(auth, users, email, password, name):
    result = _signup(auth, email=email, password=password, name=name)

    assert result.error.code == AuthErrorCode.VALIDATION_ERROR
    assert users.get_user_by_id(1) is None


def test_signup_keeps_user_when_email_fails(users, hasher, failing_verification, failing_notifier):
    use_case = SignUpUseCase(users, hasher, failing_verification)

    result = use_case.execute(SignUpInput(email="a@x.com", password="pw1", name="Ana"))

    assert result.error is None
    assert result.verification_sent is False
    assert failing_notifier.attempts == 1
    assert users.get_user_by_email("a@x.com") is not None


# =============================================================================
# Signin
# =============================================================================


def test_signin_unknown_email_and_wrong_password_look_the_same(auth, make_user):
    make_user(email="a@x.com", password="pw1")

    unknown = auth.signin.execute(SignInInput(email="b@x.com", password="pw1"))
    wrong = auth.signin.execute(SignInInput(email="a@x.com", password="nope"))

    assert unknown.error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert wrong.error.code == AuthErrorCode.INVALID_CREDENTIALS
    assert unknown.error.message == wrong.error.message == "Credenciales inválidas."


def test_signin_unverified_with_correct_password(auth, make_user):
    make_user(email="a@x.com", password="pw1", verified=False)

    result = auth.signin.execute(SignInInput(email="a@x.com", password="pw1"))

    assert result.error.code == AuthErrorCode.EMAIL_NOT_VERIFIED
    assert result.tokens is None


def test_signin_unverified_with_wrong_password_is_invalid_credentials(auth, make_user):
    make_user(email="a@x.com", password="pw1", verified=False)

    result = auth.signin.execute(SignInInput(email="a@x.com", password="bad"))

    assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS


def test_signin_verified_issues_pair_and_stores_refresh_hash(
    auth, make_user, users, hasher, signer
):
    user = make_user(email="a@x.com", password="pw1")

    result = auth.signin.execute(SignInInput(email="a@x.com", password="pw1"))

    assert result.error is None
    tokens = result.tokens
    assert signer.decode_access(tokens.access_token).user_id == user.id
    stored = users.get_user_by_id(user.id).refresh_token_hash
    assert stored is not None and stored != tokens.refresh_token
    assert hasher.verify(stored, tokens.refresh_token)


def test_signin_is_case_sensitive_on_email(auth, make_user):
    make_user(email="Ana@x.com", password="pw1")

    result = auth.signin.execute(SignInInput(email="ana@x.com", password="pw1"))

    assert result.error.code == AuthErrorCode.INVALID_CREDENTIALS


def test_signin_rejects_missing_password(auth, make_user):
    make_user(email="a@x.com", password="pw1")

    result = auth.signin.execute(SignInInput(email="a@x.com", password=""))

    assert result.error.code == AuthErrorCode.VALIDATION_ERROR


# =============================================================================
# Scenario
# =============================================================================


def test_signup_verify_signin_scenario(auth, notifier, clock):
    signup = _signup(auth, email="a@x.com", password="pw1")
    assert signup.user_id == 1

    blocked = auth.signin.execute(SignInInput(email="a@x.com", password="pw1"))
    assert blocked.error.code == AuthErrorCode.EMAIL_NOT_VERIFIED

    verified = auth.verify_email.execute(VerifyEmailInput(token=notifier.last_token()))
    assert verified.error is None
    assert verified.tokens.access_token

    clock.advance(seconds=1)
    signed_in = auth.signin.execute(SignInInput(email="a@x.com", password="pw1"))
    assert signed_in.error is None
    assert signed_in.tokens.access_token != verified.tokens.access_token
    assert signed_in.tokens.refresh_token != verified.tokens.refresh_token
