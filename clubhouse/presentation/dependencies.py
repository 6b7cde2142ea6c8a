from datetime import datetime
from typing import Annotated, Callable

from fastapi import Depends, Header, Request

import clubhouse.domain.services as domain_services
from clubhouse.domain.errors import RateLimited
from clubhouse.domain.ports.email_port import EmailPort
from clubhouse.domain.ports.rate_limiter import RateLimiterPort
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort
from clubhouse.infrastructure.db.uow import PgUnitOfWork
from clubhouse.infrastructure.redis_cache.rate_limit import RedisRateLimiter
from clubhouse.settings import Settings

SESSION_HEADER = "Authentication-Session-Id"


def get_app_settings(request: Request) -> Settings:
    # These are all set in create_app() / lifespan()
    return request.app.state.settings


def get_uow(request: Request) -> UnitOfWorkPort:
    return PgUnitOfWork(request.app.state.pool)


def get_email_port(request: Request) -> EmailPort:
    return request.app.state.email_adapter


def get_rate_limiter(request: Request) -> RateLimiterPort:
    return RedisRateLimiter(request.app.state.redis)


def get_code_ttl_seconds(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> int:
    return settings.code_ttl_seconds


def get_clock() -> Callable[[], datetime]:
    return domain_services.utcnow


def get_presented_token(
    session_id: Annotated[str | None, Header(alias=SESSION_HEADER)] = None,
) -> str | None:
    return session_id


async def limit_auth_attempts(
    request: Request,
    limiter: Annotated[RateLimiterPort, Depends(get_rate_limiter)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    client = request.client.host if request.client else "unknown"
    allowed = await limiter.hit(
        f"{request.url.path}:{client}",
        limit=settings.auth_rate_limit_attempts,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    if not allowed:
        raise RateLimited()
