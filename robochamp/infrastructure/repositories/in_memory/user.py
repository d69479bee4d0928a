"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/user.py
============================================================
Class: InMemoryUserRepository

Responsibilities:
  - Implementar UserCredentialRepository en memoria (tests / local dev).
  - Replicar la semántica de los UPDATE condicionales de Postgres:
    cada "verificar y mutar" corre bajo el mismo lock.
  - Mantener el índice email -> id para unicidad.

Collaborators:
  - identity.users.User / UserRole
  - crosscutting.exceptions.DuplicateEmailError

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - User es inmutable: cada escritura reemplaza la entidad (dataclasses.replace).
============================================================
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Dict, Optional

from ....crosscutting.clock import Clock, utc_now
from ....crosscutting.exceptions import DuplicateEmailError
from ....identity.users import User, UserRole


class InMemoryUserRepository:
    def __init__(self, clock: Clock = utc_now) -> None:
        self._lock = Lock()
        self._clock = clock
        self._ids = itertools.count(1)
        self._users: Dict[int, User] = {}
        self._ids_by_email: Dict[str, int] = {}

    # =========================================================
    # Helpers internos
    # =========================================================
    def _update(self, user_id: int, **changes) -> Optional[User]:
        """R: Reemplaza campos de un usuario existente (llamar con el lock tomado)."""
        current = self._users.get(user_id)
        if current is None:
            return None
        updated = replace(current, updated_at=self._clock(), **changes)
        self._users[user_id] = updated
        return updated

    # =========================================================
    # Lecturas
    # =========================================================
    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._users.get(user_id) if user_id is not None else None

    def get_user_by_verification_token(self, token_hash: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.verification_token_hash == token_hash:
                    return user
            return None

    # =========================================================
    # Escrituras
    # =========================================================
    def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        with self._lock:
            if email in self._ids_by_email:
                raise DuplicateEmailError("Email already registered")
            now = self._clock()
            user = User(
                id=next(self._ids),
                email=email,
                name=name,
                password_hash=password_hash,
                role=role,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._ids_by_email[email] = user.id
            return user

    def update_password_hash(self, user_id: int, password_hash: str) -> Optional[User]:
        with self._lock:
            return self._update(user_id, password_hash=password_hash)

    def set_refresh_token_hash(self, user_id: int, token_hash: str) -> Optional[User]:
        with self._lock:
            return self._update(user_id, refresh_token_hash=token_hash)

    def compare_and_set_refresh_token_hash(
        self, user_id: int, *, expected_hash: str, new_hash: str
    ) -> bool:
        with self._lock:
            current = self._users.get(user_id)
            if current is None or current.refresh_token_hash != expected_hash:
                return False
            self._update(user_id, refresh_token_hash=new_hash)
            return True

    def clear_refresh_token_hash(self, user_id: int) -> bool:
        with self._lock:
            current = self._users.get(user_id)
            if current is None or current.refresh_token_hash is None:
                return False
            self._update(user_id, refresh_token_hash=None)
            return True

    def set_verification_token(
        self, user_id: int, *, token_hash: str, expires_at: datetime
    ) -> Optional[User]:
        with self._lock:
            return self._update(
                user_id,
                verification_token_hash=token_hash,
                verification_token_expires_at=expires_at,
            )

    def consume_verification_token(
        self,
        user_id: int,
        *,
        token_hash: str,
        now: datetime,
        mark_verified: bool,
        password_hash: str | None = None,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if (
                current is None
                or current.verification_token_hash != token_hash
                or current.verification_expired(now)
            ):
                return None
            return self._update(
                user_id,
                verification_token_hash=None,
                verification_token_expires_at=None,
                email_verified=current.email_verified or mark_verified,
                password_hash=password_hash or current.password_hash,
            )

    def clear_verification_token(self, user_id: int, *, token_hash: str) -> bool:
        with self._lock:
            current = self._users.get(user_id)
            if current is None or current.verification_token_hash != token_hash:
                return False
            self._update(
                user_id,
                verification_token_hash=None,
                verification_token_expires_at=None,
            )
            return True
