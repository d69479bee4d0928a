"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/user.py
============================================================
Class: PostgresUserRepository

Responsibilities:
  - Implementar UserCredentialRepository sobre la tabla `users`.
  - Resolver las secuencias "verificar y mutar" en UN solo UPDATE condicional
    (rotación de refresh, consumo de token de verificación).
  - Mapear filas crudas -> entidad `User` validando `UserRole`.
  - Traducir violaciones de unicidad de email a DuplicateEmailError y el resto
    de fallos a DatabaseError, con logging estructurado.

Collaborators:
  - psycopg_pool.ConnectionPool (inyectable; si es None se usa el global)
  - identity.users.User / UserRole
  - crosscutting.exceptions.DatabaseError / DuplicateEmailError

Constraints / Notes:
  - SQL parametrizado siempre.
  - Retorna None cuando no existe el recurso (no exception por "not found").
  - El esquema (migraciones fuera de este repo) se asume así:

      CREATE TABLE users (
          id                            BIGSERIAL PRIMARY KEY,
          email                         TEXT NOT NULL UNIQUE,
          name                          TEXT NOT NULL,
          password_hash                 TEXT NOT NULL,
          role                          TEXT NOT NULL DEFAULT 'user',
          email_verified                BOOLEAN NOT NULL DEFAULT FALSE,
          refresh_token_hash            TEXT,
          verification_token_hash       TEXT UNIQUE,
          verification_token_expires_at TIMESTAMPTZ,
          created_at                    TIMESTAMPTZ NOT NULL DEFAULT now(),
          updated_at                    TIMESTAMPTZ NOT NULL DEFAULT now()
      );
============================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError, DuplicateEmailError
from ....crosscutting.logger import logger
from ....identity.users import User, UserRole

# R: Lista explícita de columnas; el orden es el contrato de _row_to_user.
_USER_COLUMNS = (
    "id, email, name, password_hash, role, email_verified, "
    "refresh_token_hash, verification_token_hash, verification_token_expires_at, "
    "created_at, updated_at"
)


def _resolve_pool(pool: ConnectionPool | None) -> ConnectionPool:
    if pool is not None:
        return pool
    from ...db.pool import get_pool

    return get_pool()


def _row_to_user(row: tuple) -> User:
    try:
        role = UserRole(row[4])
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[4]}") from exc

    return User(
        id=row[0],
        email=row[1],
        name=row[2],
        password_hash=row[3],
        role=role,
        email_verified=bool(row[5]),
        refresh_token_hash=row[6],
        verification_token_hash=row[7],
        verification_token_expires_at=row[8],
        created_at=row[9],
        updated_at=row[10],
    )


def _fetchone(
    pool: ConnectionPool | None,
    *,
    query: str,
    params: Iterable[object],
    log_msg: str,
    log_extra: dict[str, object],
) -> tuple | None:
    """
    Ejecuta una sentencia con fetchone() y manejo consistente de errores.

    El bloque `pool.connection()` hace commit al salir sin error.
    """
    try:
        with _resolve_pool(pool).connection() as conn:
            return conn.execute(query, tuple(params)).fetchone()
    except pg_errors.UniqueViolation as exc:
        raise DuplicateEmailError("Email already registered", original_error=exc) from exc
    except DatabaseError:
        raise
    except Exception as exc:
        logger.exception(log_msg, extra={**log_extra, "error": str(exc)})
        raise DatabaseError(f"{log_msg}: {exc}", original_error=exc) from exc


def _user_or_none(row: tuple | None) -> Optional[User]:
    return _row_to_user(row) if row else None


# ============================================================
# Lecturas
# ============================================================
def get_user_by_id(user_id: int, *, pool: ConnectionPool | None = None) -> Optional[User]:
    row = _fetchone(
        pool,
        query=f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
        params=(user_id,),
        log_msg="PostgresUserRepository: get_user_by_id failed",
        log_extra={"user_id": user_id},
    )
    return _user_or_none(row)


def get_user_by_email(email: str, *, pool: ConnectionPool | None = None) -> Optional[User]:
    """Match exacto (el email se guarda tal cual, solo recortado)."""
    row = _fetchone(
        pool,
        query=f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s",
        params=(email,),
        log_msg="PostgresUserRepository: get_user_by_email failed",
        log_extra={"email": email},
    )
    return _user_or_none(row)


def get_user_by_verification_token(
    token_hash: str, *, pool: ConnectionPool | None = None
) -> Optional[User]:
    row = _fetchone(
        pool,
        query=f"SELECT {_USER_COLUMNS} FROM users WHERE verification_token_hash = %s",
        params=(token_hash,),
        log_msg="PostgresUserRepository: get_user_by_verification_token failed",
        log_extra={},
    )
    return _user_or_none(row)


# ============================================================
# Escrituras
# ============================================================
def create_user(
    *,
    email: str,
    name: str,
    password_hash: str,
    role: UserRole = UserRole.USER,
    pool: ConnectionPool | None = None,
) -> User:
    row = _fetchone(
        pool,
        query=f"""
            INSERT INTO users (email, name, password_hash, role)
            VALUES (%s, %s, %s, %s)
            RETURNING {_USER_COLUMNS}
        """,
        params=(email, name, password_hash, role.value),
        log_msg="PostgresUserRepository: create_user failed",
        log_extra={"email": email, "role": role.value},
    )
    if not row:
        raise DatabaseError("PostgresUserRepository: create_user failed (no row returned)")
    return _row_to_user(row)


def update_password_hash(
    user_id: int, password_hash: str, *, pool: ConnectionPool | None = None
) -> Optional[User]:
    row = _fetchone(
        pool,
        query=f"""
            UPDATE users
            SET password_hash = %s, updated_at = now()
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
        """,
        params=(password_hash, user_id),
        log_msg="PostgresUserRepository: update_password_hash failed",
        log_extra={"user_id": user_id},
    )
    return _user_or_none(row)


def set_refresh_token_hash(
    user_id: int, token_hash: str, *, pool: ConnectionPool | None = None
) -> Optional[User]:
    row = _fetchone(
        pool,
        query=f"""
            UPDATE users
            SET refresh_token_hash = %s, updated_at = now()
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
        """,
        params=(token_hash, user_id),
        log_msg="PostgresUserRepository: set_refresh_token_hash failed",
        log_extra={"user_id": user_id},
    )
    return _user_or_none(row)


def compare_and_set_refresh_token_hash(
    user_id: int,
    *,
    expected_hash: str,
    new_hash: str,
    pool: ConnectionPool | None = None,
) -> bool:
    row = _fetchone(
        pool,
        query="""
            UPDATE users
            SET refresh_token_hash = %s, updated_at = now()
            WHERE id = %s AND refresh_token_hash = %s
            RETURNING id
        """,
        params=(new_hash, user_id, expected_hash),
        log_msg="PostgresUserRepository: compare_and_set_refresh_token_hash failed",
        log_extra={"user_id": user_id},
    )
    return row is not None


def clear_refresh_token_hash(user_id: int, *, pool: ConnectionPool | None = None) -> bool:
    row = _fetchone(
        pool,
        query="""
            UPDATE users
            SET refresh_token_hash = NULL, updated_at = now()
            WHERE id = %s AND refresh_token_hash IS NOT NULL
            RETURNING id
        """,
        params=(user_id,),
        log_msg="PostgresUserRepository: clear_refresh_token_hash failed",
        log_extra={"user_id": user_id},
    )
    return row is not None


def set_verification_token(
    user_id: int,
    *,
    token_hash: str,
    expires_at: datetime,
    pool: ConnectionPool | None = None,
) -> Optional[User]:
    row = _fetchone(
        pool,
        query=f"""
            UPDATE users
            SET verification_token_hash = %s,
                verification_token_expires_at = %s,
                updated_at = now()
            WHERE id = %s
            RETURNING {_USER_COLUMNS}
        """,
        params=(token_hash, expires_at, user_id),
        log_msg="PostgresUserRepository: set_verification_token failed",
        log_extra={"user_id": user_id},
    )
    return _user_or_none(row)


def consume_verification_token(
    user_id: int,
    *,
    token_hash: str,
    now: datetime,
    mark_verified: bool,
    password_hash: str | None = None,
    pool: ConnectionPool | None = None,
) -> Optional[User]:
    """
    Consume el token en un único UPDATE condicional.

    Si otro request lo consumió (o venció) entre el look-up y este UPDATE,
    no matchea ninguna fila y se devuelve None.
    """
    row = _fetchone(
        pool,
        query=f"""
            UPDATE users
            SET verification_token_hash = NULL,
                verification_token_expires_at = NULL,
                email_verified = email_verified OR %s,
                password_hash = COALESCE(%s, password_hash),
                updated_at = now()
            WHERE id = %s
              AND verification_token_hash = %s
              AND verification_token_expires_at > %s
            RETURNING {_USER_COLUMNS}
        """,
        params=(mark_verified, password_hash, user_id, token_hash, now),
        log_msg="PostgresUserRepository: consume_verification_token failed",
        log_extra={"user_id": user_id},
    )
    return _user_or_none(row)


def clear_verification_token(
    user_id: int, *, token_hash: str, pool: ConnectionPool | None = None
) -> bool:
    row = _fetchone(
        pool,
        query="""
            UPDATE users
            SET verification_token_hash = NULL,
                verification_token_expires_at = NULL,
                updated_at = now()
            WHERE id = %s AND verification_token_hash = %s
            RETURNING id
        """,
        params=(user_id, token_hash),
        log_msg="PostgresUserRepository: clear_verification_token failed",
        log_extra={"user_id": user_id},
    )
    return row is not None


# ============================================================
# Clase wrapper (contrato UserCredentialRepository)
# ============================================================
class PostgresUserRepository:
    """Wrapper OO sobre las funciones del módulo; el pool es inyectable para tests."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    # --- Lectura ---
    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return get_user_by_id(user_id, pool=self._pool)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return get_user_by_email(email, pool=self._pool)

    def get_user_by_verification_token(self, token_hash: str) -> Optional[User]:
        return get_user_by_verification_token(token_hash, pool=self._pool)

    # --- Escritura ---
    def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        return create_user(
            email=email,
            name=name,
            password_hash=password_hash,
            role=role,
            pool=self._pool,
        )

    def update_password_hash(self, user_id: int, password_hash: str) -> Optional[User]:
        return update_password_hash(user_id, password_hash, pool=self._pool)

    def set_refresh_token_hash(self, user_id: int, token_hash: str) -> Optional[User]:
        return set_refresh_token_hash(user_id, token_hash, pool=self._pool)

    def compare_and_set_refresh_token_hash(
        self, user_id: int, *, expected_hash: str, new_hash: str
    ) -> bool:
        return compare_and_set_refresh_token_hash(
            user_id, expected_hash=expected_hash, new_hash=new_hash, pool=self._pool
        )

    def clear_refresh_token_hash(self, user_id: int) -> bool:
        return clear_refresh_token_hash(user_id, pool=self._pool)

    def set_verification_token(
        self, user_id: int, *, token_hash: str, expires_at: datetime
    ) -> Optional[User]:
        return set_verification_token(
            user_id, token_hash=token_hash, expires_at=expires_at, pool=self._pool
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
        return consume_verification_token(
            user_id,
            token_hash=token_hash,
            now=now,
            mark_verified=mark_verified,
            password_hash=password_hash,
            pool=self._pool,
        )

    def clear_verification_token(self, user_id: int, *, token_hash: str) -> bool:
        return clear_verification_token(user_id, token_hash=token_hash, pool=self._pool)
