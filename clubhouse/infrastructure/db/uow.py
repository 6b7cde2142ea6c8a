from __future__ import annotations

from contextlib import suppress
from typing import Any, Optional, Type

import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from clubhouse.domain.errors import StoreError
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort
from clubhouse.infrastructure.db.identities_repo import PgIdentityStore


class PgUnitOfWork(UnitOfWorkPort):
    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn_cm: Optional[Any] = None
        self._conn: Optional[psycopg.AsyncConnection] = None
        self._committed: bool = False
        self.identities: PgIdentityStore

    async def __aenter__(self) -> "PgUnitOfWork":
        self._conn_cm = self._pool.connection()
        try:
            self._conn = await self._conn_cm.__aenter__()
        except (psycopg.Error, PoolTimeout) as e:
            self._conn_cm = None
            raise StoreError(f"cannot acquire connection: {e}") from e
        self.identities = PgIdentityStore(self._conn)
        self._committed = False
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: Any,
    ) -> None:
        try:
            if self._conn:
                if exc_value or not self._committed:
                    # connection may already be broken
                    with suppress(psycopg.Error):
                        await self._conn.rollback()
        finally:
            if self._conn_cm:
                await self._conn_cm.__aexit__(exc_type, exc_value, traceback)
            self._conn = None
            self._conn_cm = None
            self._committed = False

    async def commit(self) -> None:
        if not self._conn:
            raise RuntimeError("No connection available to commit")
        try:
            await self._conn.commit()
        except psycopg.Error as e:
            raise StoreError(f"commit failed: {e}") from e
        self._committed = True
