"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide development defaults for auth, mail and database

Collaborators:
  - identity/auth_settings.py: snapshot of JWT secrets / TTLs
  - container.py: chooses repository and notifier adapters
  - api/main.py: reads settings for CORS and pool startup

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
  - Secrets for access and refresh tokens are independent on purpose
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = {
    "dev-secret",
    "dev-access-secret",
    "dev-refresh-secret",
    "changeme",
    "change-me",
    "password",
}

_MAIL_MODES = {"console", "resend"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        database_url: PostgreSQL connection string (required in production)
        allowed_origins: Comma-separated CORS origins
        log_level: Root log level for the app logger
        log_json: Emit JSON logs (default: True)
        jwt_access_secret: Secret for signing access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes (default: 15)
        jwt_refresh_secret: Secret for signing refresh tokens
        jwt_refresh_ttl_minutes: Refresh token TTL in minutes (default: 7 days)
        verification_token_ttl_hours: Email verification / reset link TTL
        otp_ttl_minutes: Numeric one-time code TTL
        frontend_url: Base URL used to build links sent by email
        mail_mode: console|resend
        mail_sender_name: Display name of the sender
        mail_sender_address: Sender address
        resend_api_key: Resend API key (mail_mode=resend)
        resend_api_url: Resend endpoint
        mail_timeout_seconds: Timeout for outbound mail requests
        db_pool_min_size: Pool min connections
        db_pool_max_size: Pool max connections
        db_statement_timeout_ms: statement_timeout applied per connection
    """

    # Environment
    app_env: str = "development"

    # Database
    database_url: str = ""
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Security - JWT Auth
    jwt_access_secret: str = "dev-access-secret"
    jwt_access_ttl_minutes: int = 15
    jwt_refresh_secret: str = "dev-refresh-secret"
    jwt_refresh_ttl_minutes: int = 7 * 24 * 60

    # Verification flows
    verification_token_ttl_hours: int = 24
    otp_ttl_minutes: int = 5
    frontend_url: str = "http://localhost:3000"

    # Mail
    mail_mode: str = "console"
    mail_sender_name: str = "RoboChamp"
    mail_sender_address: str = "no-reply@robochamp.local"
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    mail_timeout_seconds: float = 10.0

    @field_validator(
        "jwt_access_ttl_minutes",
        "jwt_refresh_ttl_minutes",
        "verification_token_ttl_hours",
        "otp_ttl_minutes",
    )
    @classmethod
    def ttl_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("TTL values must be greater than 0")
        return v

    @field_validator("mail_mode")
    @classmethod
    def mail_mode_valid(cls, v: str) -> str:
        mode = (v or "console").strip().lower()
        if mode not in _MAIL_MODES:
            raise ValueError("mail_mode must be console or resend")
        return mode

    @field_validator("frontend_url")
    @classmethod
    def frontend_url_without_trailing_slash(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_mail_requirements(self):
        if self.mail_mode == "resend":
            if not self.resend_api_key.strip():
                raise ValueError("RESEND_API_KEY is required when MAIL_MODE=resend")
            if not self.mail_sender_address.strip():
                raise ValueError(
                    "MAIL_SENDER_ADDRESS is required when MAIL_MODE=resend"
                )
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        for name in ("jwt_access_secret", "jwt_refresh_secret"):
            secret = (getattr(self, name) or "").strip()
            if not secret or secret in _INSECURE_SECRETS:
                raise ValueError(
                    f"{name.upper()} must be set to a strong, non-default value in production"
                )
            if len(secret) < 32:
                raise ValueError(
                    f"{name.upper()} must be at least 32 characters in production"
                )

        if self.jwt_access_secret.strip() == self.jwt_refresh_secret.strip():
            raise ValueError(
                "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different"
            )
        if not self.database_url.strip():
            raise ValueError("DATABASE_URL is required in production")

        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def is_test(self) -> bool:
        return self.app_env.strip().lower() in {"test", "testing", "ci"}

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
