from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Protocol, Type

from clubhouse.domain.ports.identity_store import IdentityStorePort


@dataclass
class UnitOfWorkPort(Protocol):
    """
    Transaction boundary.

    Usage:
        async with uow as tx:
            identity = await tx.identities.find_by_email(email)
            await tx.identities.update_fields(email, {...})
            await tx.commit()
    """

    identities: IdentityStorePort

    async def __aenter__(self) -> "UnitOfWorkPort":
        """Begin a new transaction. Code here runs before code in the context manager."""

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """End the transaction. Uncommitted work is rolled back."""

    async def commit(self) -> None:
        """Commit the transaction."""
