import logging
from datetime import datetime, timedelta
from typing import Callable

import clubhouse.domain.services as domain_services
from clubhouse.domain.entities import normalize_email
from clubhouse.domain.errors import DomainError, IdentityNotFound
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


async def authenticate(
    uow: UnitOfWorkPort,
    email: str,
    code: str,
    ip_address: str | None = None,
    code_ttl_seconds: int = 60,
    now: Callable[[], datetime] = domain_services.utcnow,
) -> str:
    """
    Exchange a one-time code for a new session token.

    The code is left in place after a successful login; it stays usable
    until it expires or a new one is requested.
    """
    normalized_email = normalize_email(email)

    async with uow as transaction:
        identity = await transaction.identities.find_by_email(normalized_email)
        if identity is None:
            raise IdentityNotFound()
        try:
            identity.verify_code(code, now(), timedelta(seconds=code_ttl_seconds))
        except DomainError as exc:
            logger.info(
                "login rejected",
                extra={"email": normalized_email, "reason": type(exc).__name__},
            )
            raise

        identity.start_session(domain_services.generate_session_token(), ip_address)
        await transaction.identities.update_fields(
            normalized_email,
            {
                "session_token": identity.session_token,
                "ip_address": identity.ip_address,
            },
        )
        await transaction.commit()

    logger.info("session issued", extra={"email": normalized_email})
    return identity.session_token
