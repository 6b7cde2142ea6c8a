from __future__ import annotations

import functools
from typing import Any, Optional

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from clubhouse.domain.entities import Identity
from clubhouse.domain.errors import StoreError
from clubhouse.domain.ports.identity_store import IdentityStorePort

UPDATABLE_FIELDS = frozenset(
    {"current_code", "code_issued_at", "session_token", "ip_address"}
)


def _store_errors(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except psycopg.Error as e:
            raise StoreError(f"{func.__name__} failed: {e}") from e

    return wrapper


class PgIdentityStore(IdentityStorePort):
    """
    Postgres implementation of IdentityStorePort.

    NOTE:
    - This store is constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    - Emails arrive already normalized (uppercase).
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    @_store_errors
    async def find_by_email(self, email: str) -> Optional[Identity]:
        query = """
        SELECT email, current_code, code_issued_at, session_token, ip_address, profile
        FROM identities
        WHERE email = %s
        """
        async with self._conn.cursor() as cur:
            await cur.execute(query, (email,))
            row = await cur.fetchone()
        if not row:
            return None

        db_email, code, issued_at, token, ip_address, profile = row
        return Identity(
            email=str(db_email),
            current_code=code,
            code_issued_at=issued_at,
            session_token=token,
            ip_address=ip_address,
            profile=profile or {},
        )

    @_store_errors
    async def insert(self, identity: Identity) -> None:
        query = """
        INSERT INTO identities
            (email, current_code, code_issued_at, session_token, ip_address, profile)
        VALUES (%s, %s, %s, %s, %s, %s)
        ON CONFLICT (email) DO UPDATE
        SET current_code = EXCLUDED.current_code,
            code_issued_at = EXCLUDED.code_issued_at
        """
        async with self._conn.cursor() as cur:
            await cur.execute(
                query,
                (
                    identity.email,
                    identity.current_code,
                    identity.code_issued_at,
                    identity.session_token,
                    identity.ip_address,
                    Jsonb(identity.profile),
                ),
            )

    @_store_errors
    async def update_fields(self, email: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"not updatable: {sorted(unknown)}")
        if not fields:
            return
        names = list(fields)
        query = sql.SQL("UPDATE identities SET {} WHERE email = %s").format(
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(name)) for name in names
            )
        )
        async with self._conn.cursor() as cur:
            await cur.execute(query, [fields[name] for name in names] + [email])

    @_store_errors
    async def merge_profile(self, email: str, fields: dict[str, Any]) -> None:
        query = """
        UPDATE identities
        SET profile = COALESCE(profile, '{}'::jsonb) || %s
        WHERE email = %s
        """
        async with self._conn.cursor() as cur:
            await cur.execute(query, (Jsonb(fields), email))
