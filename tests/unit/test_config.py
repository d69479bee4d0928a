"""
Name: Settings Tests

Responsibilities:
  - Production security requirements (strong, distinct secrets; DATABASE_URL)
  - Mail mode requirements
  - TTL validation and small helpers
"""

import pytest
from pydantic import ValidationError

from robochamp.crosscutting.config import Settings
from robochamp.identity.auth_settings import auth_settings_from

pytestmark = pytest.mark.unit

STRONG_ACCESS = "a" * 40
STRONG_REFRESH = "b" * 40


def _production(**overrides) -> Settings:
    values = {
        "app_env": "production",
        "jwt_access_secret": STRONG_ACCESS,
        "jwt_refresh_secret": STRONG_REFRESH,
        "database_url": "postgresql://db/robochamp",
        "mail_mode": "console",
    }
    values.update(overrides)
    return Settings(**values)


def test_production_with_strong_secrets_is_valid():
    settings = _production()
    assert settings.is_production() is True
    assert settings.is_test() is False


@pytest.mark.parametrize("secret", ["dev-access-secret", "short-secret", ""])
def test_production_rejects_weak_access_secret(secret):
    with pytest.raises(ValidationError):
        _production(jwt_access_secret=secret)


def test_production_rejects_shared_secret():
    with pytest.raises(ValidationError, match="must be different"):
        _production(jwt_refresh_secret=STRONG_ACCESS)


def test_production_requires_database_url():
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        _production(database_url="")


def test_resend_mode_requires_api_key():
    with pytest.raises(ValidationError, match="RESEND_API_KEY"):
        Settings(app_env="test", mail_mode="resend", resend_api_key="")

    settings = Settings(app_env="test", mail_mode=" RESEND ", resend_api_key="re_x")
    assert settings.mail_mode == "resend"


def test_unknown_mail_mode_is_rejected():
    with pytest.raises(ValidationError):
        Settings(app_env="test", mail_mode="carrier-pigeon")


def test_ttl_must_be_positive():
    with pytest.raises(ValidationError, match="TTL"):
        Settings(app_env="test", jwt_access_ttl_minutes=0)


def test_allowed_origins_list_and_frontend_url():
    settings = Settings(
        app_env="test",
        allowed_origins=" https://a.test, ,https://b.test ",
        frontend_url="https://robochamp.test/",
    )

    assert settings.get_allowed_origins_list() == ["https://a.test", "https://b.test"]
    assert settings.frontend_url == "https://robochamp.test"


def test_auth_settings_snapshot_converts_units():
    snapshot = auth_settings_from(
        Settings(
            app_env="ci",
            jwt_access_ttl_minutes=10,
            jwt_refresh_ttl_minutes=60,
            verification_token_ttl_hours=2,
        )
    )

    assert snapshot.access_ttl_seconds == 600
    assert snapshot.refresh_ttl_seconds == 3600
    assert snapshot.verification_token_ttl_seconds == 7200
    assert snapshot.algorithm == "HS256"
