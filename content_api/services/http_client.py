"""Shared HTTP client utilities: reusable httpx client."""

import httpx

from content_api.config import Settings

DEFAULT_TIMEOUT = 15.0

# Module-level shared client (created lazily, lives for the process lifetime)
_client: httpx.AsyncClient | None = None


def get_shared_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Return a shared httpx.AsyncClient, creating it on first call."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(timeout=timeout)
    return _client


async def close_shared_client() -> None:
    """Close the shared client at shutdown."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
    _client = None


def cms_headers(settings: Settings) -> dict[str, str]:
    """Build Directus request headers.

    Includes the Authorization header only when a token is configured.
    """
    headers: dict[str, str] = {"Accept": "application/json"}
    if settings.directus_token:
        headers["Authorization"] = f"Bearer {settings.directus_token}"
    return headers
