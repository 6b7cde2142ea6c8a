from typing import Any

from clubhouse.application.check_session import require_session
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort


async def get_user(
    uow: UnitOfWorkPort, email: str, presented_token: str | None
) -> dict[str, Any]:
    async with uow as transaction:
        identity = await require_session(
            transaction.identities, email, presented_token
        )
        # read-only; no commit needed
    return {"email": identity.email, **identity.profile}


async def update_user(
    uow: UnitOfWorkPort,
    email: str,
    presented_token: str | None,
    fields: dict[str, Any],
) -> None:
    async with uow as transaction:
        identity = await require_session(
            transaction.identities, email, presented_token
        )
        if fields:
            await transaction.identities.merge_profile(identity.email, fields)
        await transaction.commit()


async def update_user_avatar(
    uow: UnitOfWorkPort, email: str, presented_token: str | None, avatar: str
) -> None:
    await update_user(uow, email, presented_token, {"avatar": avatar})
