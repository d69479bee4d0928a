"""
CRC — domain/repositories.py

Name
- Credential Store port (Protocol)

Responsibilities
- Define the persistence contract used by the auth use cases.
- Keep the application layer independent from infrastructure (PostgreSQL, in-memory).
- Expose conditional updates so verify-then-mutate sequences are atomic per record.

Collaborators
- identity.users: User, UserRole
- infrastructure.repositories: postgres / in_memory implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- Reads return None when the record does not exist (no exception for "not found").

Notes
- "Conditional" methods return False/None when the precondition no longer
  holds (another request won the race); callers treat that as a failed attempt.
"""

from datetime import datetime
from typing import Optional, Protocol

from ..identity.users import User, UserRole


class UserCredentialRepository(Protocol):
    """
    R: Interface for user credential persistence.

    Implementations must provide:
      - Look-ups by id, email and pending verification token digest
      - Creation with unique email
      - Refresh-token hash rotation with compare-and-set
      - Verification token issuance / consumption / expiry
    """

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """R: Load a user by surrogate id."""
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        """R: Load a user by email (exact, case-sensitive match)."""
        ...

    def get_user_by_verification_token(self, token_hash: str) -> Optional[User]:
        """
        R: Load the user whose pending verification digest matches.

        Expired entries are returned too; the caller decides (and clears them).
        """
        ...

    def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        R: Persist a new user (email_verified=False, no session, nothing pending).

        Raises:
            DuplicateEmailError: if the email is already registered
        """
        ...

    def update_password_hash(self, user_id: int, password_hash: str) -> Optional[User]:
        """R: Replace the password hash. Does not touch the refresh hash."""
        ...

    def set_refresh_token_hash(self, user_id: int, token_hash: str) -> Optional[User]:
        """R: Unconditionally store the hash of the newest refresh token."""
        ...

    def compare_and_set_refresh_token_hash(
        self, user_id: int, *, expected_hash: str, new_hash: str
    ) -> bool:
        """
        R: Rotate the refresh hash only if the stored one still equals expected_hash.

        Returns:
            True if rotated, False if the stored hash changed meanwhile.
        """
        ...

    def clear_refresh_token_hash(self, user_id: int) -> bool:
        """R: Clear the refresh hash if set. Returns True when a row changed."""
        ...

    def set_verification_token(
        self, user_id: int, *, token_hash: str, expires_at: datetime
    ) -> Optional[User]:
        """R: Store a pending verification digest + expiry (last writer wins)."""
        ...

    def consume_verification_token(
        self,
        user_id: int,
        *,
        token_hash: str,
        now: datetime,
        mark_verified: bool,
        password_hash: str | None = None,
    ) -> Optional[User]:
        """
        R: Atomically consume a pending verification.

        Precondition (checked in the same write):
          stored digest == token_hash AND expires_at > now.
        Effects:
          clears digest + expiry; optionally sets email_verified and/or password_hash.

        Returns:
            Updated user, or None if the precondition did not hold.
        """
        ...

    def clear_verification_token(self, user_id: int, *, token_hash: str) -> bool:
        """R: Clear digest + expiry if the stored digest still equals token_hash."""
        ...
