from clubhouse.domain.entities import Identity, normalize_email
from clubhouse.domain.errors import IdentityNotFound, NotAuthenticated
from clubhouse.domain.ports.identity_store import IdentityStorePort
from clubhouse.domain.ports.unit_of_work import UnitOfWorkPort


async def _load(identities: IdentityStorePort, email: str) -> Identity:
    identity = await identities.find_by_email(normalize_email(email))
    if identity is None:
        raise IdentityNotFound()
    return identity


async def check_session(
    uow: UnitOfWorkPort, email: str, presented_token: str | None
) -> bool:
    """True iff `presented_token` is the identity's current session token."""
    async with uow as transaction:
        identity = await _load(transaction.identities, email)
    return identity.accepts_session(presented_token)


async def require_session(
    identities: IdentityStorePort, email: str, presented_token: str | None
) -> Identity:
    """Load the identity inside an open transaction, or raise NotAuthenticated."""
    identity = await _load(identities, email)
    if not identity.accepts_session(presented_token):
        raise NotAuthenticated()
    return identity
