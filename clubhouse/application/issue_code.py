import logging
from datetime import datetime
from typing import Callable

import clubhouse.domain.services as domain_services
from clubhouse.domain.entities import Identity, normalize_email
from clubhouse.domain.ports.email_port import EmailPort
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort

logger = logging.getLogger(__name__)


def render_code_email(code: str, code_ttl_seconds: int) -> tuple[str, str]:
    subject = "Your login code"
    body = (
        f"Your login code is {code}\n"
        f"It is valid for {code_ttl_seconds} seconds."
    )
    return subject, body


async def issue_code(
    uow: UnitOfWorkPort,
    email_port: EmailPort,
    email: str,
    code_ttl_seconds: int = 60,
    now: Callable[[], datetime] = domain_services.utcnow,
) -> None:
    normalized_email = normalize_email(email)
    generated_code = domain_services.generate_code()

    async with uow as transaction:
        # timestamp only once a connection is held
        issued_at = now()
        identity = await transaction.identities.find_by_email(normalized_email)
        if identity is None:
            identity = Identity(email=normalized_email)
            identity.issue_code(generated_code, issued_at)
            await transaction.identities.insert(identity)
            logger.info("identity created", extra={"email": normalized_email})
        else:
            identity.issue_code(generated_code, issued_at)
            await transaction.identities.update_fields(
                normalized_email,
                {
                    "current_code": identity.current_code,
                    "code_issued_at": identity.code_issued_at,
                },
            )
        await transaction.commit()

    # Delivery happens after commit; a failed send leaves the code stored.
    subject, body = render_code_email(generated_code, code_ttl_seconds)
    await email_port.send(to=email.strip(), subject=subject, body=body)
    logger.info("login code sent", extra={"email": normalized_email})
