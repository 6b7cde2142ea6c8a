from __future__ import annotations

from psycopg.conninfo import make_conninfo
from psycopg_pool import AsyncConnectionPool

from clubhouse.settings import Settings


def build_conninfo(settings: Settings, connect_timeout: int = 3) -> str:
    """DATABASE_URI with dbname forced to DATABASE_NAME."""
    params = {"dbname": settings.database_name}
    if "connect_timeout=" not in settings.database_uri:
        params["connect_timeout"] = str(connect_timeout)
    return make_conninfo(settings.database_uri, **params)


def create_pool(settings: Settings) -> AsyncConnectionPool:
    """
    Create the pool WITHOUT opening it.
    No deprecation warning because we pass open=False.
    """
    return AsyncConnectionPool(
        build_conninfo(settings),
        min_size=1,
        max_size=10,
        timeout=5,
        open=False,  # created closed; lifespan decides when to open
    )
