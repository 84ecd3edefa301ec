"""Bearer tokens and authorized request options.

Request options are plain mappings of keyword arguments for
`httpx.AsyncClient.request` (`method`, `url`, `headers`, `json`, ...).
"""

import logging
from collections.abc import Mapping
from typing import Any

from google_auto_auth.auth.resolver import AuthClientResolver

logger = logging.getLogger(__name__)


class TokenProvider:
    """Produce access tokens, short-circuiting on a configured static token."""

    def __init__(self, resolver: AuthClientResolver):
        self._resolver = resolver

    async def get_token(self) -> str:
        token = self._resolver.config.token
        if token:
            logger.debug("Using static token from configuration")
            return token

        client = await self._resolver.resolve()
        return await client.get_access_token()


class RequestAuthorizer:
    """Merge an `Authorization: Bearer` header into copies of request options."""

    def __init__(self, token_provider: TokenProvider):
        self._token_provider = token_provider

    async def authorize_request(self, req_opts: Mapping[str, Any]) -> dict[str, Any]:
        """Return authorized request options without mutating `req_opts`.

        Args:
            req_opts: Request options; existing headers are preserved.

        Returns:
            New request options whose headers also carry the bearer token.
        """
        token = await self._token_provider.get_token()

        # Header names are case-insensitive; drop any existing spelling so only one Authorization is sent
        headers = {
            name: value for name, value in (req_opts.get("headers") or {}).items() if name.lower() != "authorization"
        }
        headers["Authorization"] = f"Bearer {token}"

        return {**req_opts, "headers": headers}
