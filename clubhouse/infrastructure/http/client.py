from __future__ import annotations

import httpx


def create_http_client(timeout: float = 10.0) -> httpx.AsyncClient:
    """The single AsyncClient shared by outbound adapters; closed at shutdown."""
    return httpx.AsyncClient(timeout=timeout)
