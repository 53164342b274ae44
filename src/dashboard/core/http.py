"""
Shared HTTP client for the external REST API.

Owns everything the country client deliberately leaves out:
- Base URL and JSON headers
- Request timeout
- Bearer token injection for privileged endpoints
- Forgetting the token once the API answers 401
"""

from typing import Optional

import httpx
import structlog

from core.config import settings

logger = structlog.get_logger(__name__)


class TokenStore:
    """In-memory holder for the API bearer token."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    @property
    def token(self) -> Optional[str]:
        return self._token

    def clear(self) -> None:
        self._token = None


def create_api_client(
    token_store: TokenStore,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for every call to the external API.

    Args:
        token_store: Source of the bearer token, cleared on 401 responses
        base_url: Overrides settings.API_BASE_URL
        timeout: Overrides settings.API_TIMEOUT_SECONDS
        transport: Custom transport (tests use httpx.MockTransport)

    Returns:
        Configured httpx.AsyncClient; the caller owns closing it
    """

    async def add_auth_header(request: httpx.Request) -> None:
        if token_store.token:
            request.headers["Authorization"] = f"Bearer {token_store.token}"

    async def drop_token_on_unauthorized(response: httpx.Response) -> None:
        if response.status_code == 401:
            logger.warning("api_unauthorized", url=str(response.request.url))
            token_store.clear()

    return httpx.AsyncClient(
        base_url=base_url or settings.API_BASE_URL,
        timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
        headers={"Content-Type": "application/json"},
        event_hooks={
            "request": [add_auth_header],
            "response": [drop_token_on_unauthorized],
        },
        transport=transport,
    )
