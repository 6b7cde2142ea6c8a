from __future__ import annotations

from typing import Optional

import httpx

from clubhouse.domain.errors import DeliveryError
from clubhouse.domain.ports.email_port import EmailPort


def parse_credentials(credentials: str) -> tuple[str, str]:
    """'user:password' -> ('user', 'password'); the password may contain ':'."""
    user, sep, password = credentials.partition(":")
    if not sep or not user:
        raise ValueError("sender credentials must look like 'user:password'")
    return user, password


class HttpRelayEmailAdapter(EmailPort):
    """Sends mail through an HTTP relay: POST {relay}/send with basic auth."""

    def __init__(
        self,
        relay_host: str,
        *,
        sender_address: str,
        sender_credentials: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        base_url = relay_host.rstrip("/")
        if "://" not in base_url:
            base_url = f"http://{base_url}"
        self._base_url = base_url
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._sender = sender_address
        self._auth = httpx.BasicAuth(*parse_credentials(sender_credentials))
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, *, to: str, subject: str, body: str) -> None:
        url = f"{self._base_url}{self._send_path}"
        payload = {"from": self._sender, "to": to, "subject": subject, "body": body}

        try:
            resp = await self._client.post(url, json=payload, auth=self._auth)
        except httpx.HTTPError as e:
            raise DeliveryError(f"relay HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            raise DeliveryError(f"relay responded {resp.status_code}: {text}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
