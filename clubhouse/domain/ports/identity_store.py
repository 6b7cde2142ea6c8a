from __future__ import annotations

from typing import Any, Optional, Protocol

from clubhouse.domain.entities import Identity


class IdentityStorePort(Protocol):
    """Document-store contract for identity records, keyed by normalized email."""

    async def find_by_email(self, email: str) -> Optional[Identity]:
        """Return the record for `email`, or None if absent."""

    async def insert(self, identity: Identity) -> None:
        """
        Create a new record. If the email was created concurrently, only its
        current_code and code_issued_at are overwritten (last writer wins).
        """

    async def update_fields(self, email: str, fields: dict[str, Any]) -> None:
        """
        Overwrite the given top-level fields in one write
        (current_code, code_issued_at, session_token, ip_address).
        """

    async def merge_profile(self, email: str, fields: dict[str, Any]) -> None:
        """Shallow-merge `fields` into the record's profile."""
