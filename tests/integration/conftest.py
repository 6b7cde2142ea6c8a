# tests/integration/conftest.py
import asyncio
import os
import time
from pathlib import Path

import pytest_asyncio
from psycopg_pool import AsyncConnectionPool
from redis.asyncio import Redis

from clubhouse.infrastructure.db.pool import create_pool
from clubhouse.settings import get_settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@pytest_asyncio.fixture
async def redis_client():
    url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
    r = Redis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        yield r
    finally:
        await r.aclose()


async def _wait_pool_ready(p: AsyncConnectionPool, timeout: float = 30.0) -> None:
    """Retry simple SELECT until Postgres accepts connections."""
    deadline = time.monotonic() + timeout
    last_exc: Exception | None = None
    while time.monotonic() < deadline:
        try:
            async with p.connection(timeout=1) as conn:
                await conn.execute("SELECT 1;")
            return
        except Exception as e:
            last_exc = e
            await asyncio.sleep(0.5)
    # if we're here, we never managed to connect
    if last_exc:
        raise last_exc
    raise TimeoutError("database not ready")


@pytest_asyncio.fixture
async def pool():
    p = create_pool(get_settings())
    await p.open()
    await _wait_pool_ready(p, timeout=30)
    async with p.connection() as conn:
        for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
            await conn.execute(path.read_text(encoding="utf-8"))
    try:
        yield p
    finally:
        await p.close()


@pytest_asyncio.fixture
async def truncate_identities(pool: AsyncConnectionPool):
    async with pool.connection() as conn:
        await conn.execute("TRUNCATE identities;")
    yield
    async with pool.connection() as conn:
        await conn.execute("TRUNCATE identities;")
