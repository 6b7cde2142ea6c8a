import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from clubhouse.domain.errors import (
    CodeExpired,
    DeliveryError,
    DomainError,
    IdentityNotFound,
    InvalidCode,
    NotAuthenticated,
    RateLimited,
    StoreError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

# Checked in order; first isinstance match wins.
ERROR_RESPONSES: tuple[tuple[type[DomainError], int, str], ...] = (
    (IdentityNotFound, status.HTTP_404_NOT_FOUND, "Unknown email address"),
    (InvalidCode, status.HTTP_403_FORBIDDEN, "Invalid authorization code"),
    (CodeExpired, status.HTTP_403_FORBIDDEN, "Expired authorization code"),
    (NotAuthenticated, status.HTTP_403_FORBIDDEN, "Not authenticated"),
    (
        RateLimited,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many authentication attempts, please try again later",
    ),
    (DeliveryError, *INTERNAL_ERROR),
    (StoreError, *INTERNAL_ERROR),
)


def resolve(exc: DomainError) -> tuple[int, str]:
    for error_type, status_code, message in ERROR_RESPONSES:
        if isinstance(exc, error_type):
            return status_code, message
    return INTERNAL_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors to {"message": ...} responses."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code, message = resolve(exc)
        if status_code >= 500:
            logger.error(
                "request failed",
                exc_info=exc,
                extra={"path": request.url.path, "error": type(exc).__name__},
            )
        else:
            logger.info(
                "request rejected",
                extra={"path": request.url.path, "error": type(exc).__name__},
            )
        return JSONResponse(status_code=status_code, content={"message": message})
