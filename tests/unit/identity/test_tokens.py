"""
Name: Token Signer Tests

Responsibilities:
  - Access/refresh pairs carry the right claims and TTLs
  - Each token class only verifies with its own secret and type
  - Expiry is evaluated against the injected clock
"""

import jwt
import pytest

from robochamp.identity.tokens import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_REFRESH,
    TokenSigner,
    TokenVerificationError,
)
from robochamp.identity.users import User, UserRole

pytestmark = pytest.mark.unit


def _user() -> User:
    return User(
        id=7,
        email="team@robochamp.test",
        name="Team",
        password_hash="x",
        role=UserRole.ADMIN,
        email_verified=True,
    )


def test_issue_pair_claims(signer, auth_settings, clock):
    pair = signer.issue_pair(_user())

    access = signer.decode_access(pair.access_token)
    refresh = signer.decode_refresh(pair.refresh_token)

    assert access.user_id == 7
    assert access.email == "team@robochamp.test"
    assert access.role == UserRole.ADMIN
    assert access.token_type == TOKEN_TYPE_ACCESS
    assert refresh.token_type == TOKEN_TYPE_REFRESH
    assert pair.token_type == "bearer"
    assert pair.expires_in == auth_settings.access_ttl_seconds
    assert pair.refresh_expires_in == auth_settings.refresh_ttl_seconds
    assert (access.expires_at - clock()).total_seconds() == auth_settings.access_ttl_seconds


def test_subject_is_string_in_payload(signer, auth_settings):
    pair = signer.issue_pair(_user())
    payload = jwt.decode(
        pair.access_token,
        auth_settings.access_secret,
        algorithms=["HS256"],
        options={"verify_exp": False, "verify_iat": False},
    )
    assert payload["sub"] == "7"


def test_pairs_issued_in_same_instant_differ(signer):
    first = signer.issue_pair(_user())
    second = signer.issue_pair(_user())

    assert first.access_token != second.access_token
    assert first.refresh_token != second.refresh_token


def test_access_token_is_not_a_refresh_token(signer):
    pair = signer.issue_pair(_user())

    with pytest.raises(TokenVerificationError):
        signer.decode_refresh(pair.access_token)
    with pytest.raises(TokenVerificationError):
        signer.decode_access(pair.refresh_token)


def test_token_signed_with_other_secret_is_rejected(auth_settings, clock):
    from dataclasses import replace

    other = TokenSigner(
        replace(auth_settings, access_secret="another-secret-cccccccccccccccccccccccc"),
        clock=clock,
    )
    pair = other.issue_pair(_user())

    with pytest.raises(TokenVerificationError) as excinfo:
        TokenSigner(auth_settings, clock=clock).decode_access(pair.access_token)
    assert excinfo.value.expired is False


def test_access_token_expires_with_clock(signer, clock, auth_settings):
    pair = signer.issue_pair(_user())

    clock.advance(seconds=auth_settings.access_ttl_seconds - 1)
    assert signer.decode_access(pair.access_token).user_id == 7

    clock.advance(seconds=1)
    with pytest.raises(TokenVerificationError) as excinfo:
        signer.decode_access(pair.access_token)
    assert excinfo.value.expired is True

    # refresh sigue vigente (TTL propio)
    assert signer.decode_refresh(pair.refresh_token).user_id == 7


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
def test_garbage_is_invalid(signer, garbage):
    with pytest.raises(TokenVerificationError):
        signer.decode_access(garbage)
