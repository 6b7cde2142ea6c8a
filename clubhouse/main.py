import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clubhouse.infrastructure.db.pool import create_pool
from clubhouse.infrastructure.email.http_relay_adapter import HttpRelayEmailAdapter
from clubhouse.infrastructure.http.client import create_http_client
from clubhouse.infrastructure.redis_cache.pool import create_redis
from clubhouse.logging import setup_logging
from clubhouse.presentation.api import api
from clubhouse.presentation.error_handlers import register_error_handlers
from clubhouse.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    # startup
    pool = create_pool(settings)
    await pool.open()
    app.state.pool = pool

    app.state.redis = create_redis(settings)

    # ONE shared HTTP client, used by the email adapter
    http_client = create_http_client()
    app.state.email_adapter = HttpRelayEmailAdapter(
        settings.relay_host,
        sender_address=settings.sender_address,
        sender_credentials=settings.sender_credentials,
        client=http_client,
    )
    logger.info("startup complete", extra={"env": settings.app_env})

    try:
        yield
    finally:
        # shutdown
        await app.state.email_adapter.aclose()  # it won't close the shared client
        await http_client.aclose()
        await app.state.redis.aclose()
        await pool.close()
        logger.info("shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Clubhouse API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(api)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.listen_port)


if __name__ == "__main__":
    run()
