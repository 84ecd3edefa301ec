"""Entry point composing resolution, authorization, signing and platform detection."""

from collections.abc import Mapping
from typing import Any

import httpx

from google_auto_auth.auth.clients import AuthClient, AuthLibrary
from google_auto_auth.auth.resolver import AuthClientResolver, CredentialsRecord
from google_auto_auth.auth.tokens import RequestAuthorizer, TokenProvider
from google_auto_auth.config import AuthConfig
from google_auto_auth.environment import EnvironmentFlags, EnvironmentProber
from google_auto_auth.signing.signer import Signer
from google_auto_auth.transport import create_http_client


class AutoAuth:
    """Authorize requests and sign data with automatically resolved credentials.

    One instance resolves its credentials at most once; create a new instance
    to pick up different credentials.

    Args:
        config: Where credentials come from. Defaults to ambient credentials.
        library: Auth library used to build clients. Defaults to google-auth.
        http_client: Client for signBlob calls and metadata probes. If omitted,
            one is created and closed by `aclose()`.
        env: Environment variables for platform detection. Defaults to `os.environ`.

    Example:
        ```python
        async with AutoAuth(AuthConfig(key_filename="key.json", scopes=SCOPES)) as auth:
            req_opts = await auth.authorize_request({"method": "GET", "url": url})
        ```
    """

    def __init__(
        self,
        config: AuthConfig | None = None,
        *,
        library: AuthLibrary | None = None,
        http_client: httpx.AsyncClient | None = None,
        env: Mapping[str, str] | None = None,
    ):
        self.config = config if config is not None else AuthConfig()
        self._owns_http_client = http_client is None
        self._http_client = http_client if http_client is not None else create_http_client()

        self._resolver = AuthClientResolver(self.config, library)
        self._token_provider = TokenProvider(self._resolver)
        self._authorizer = RequestAuthorizer(self._token_provider)
        self._signer = Signer(self._resolver, self._authorizer, self._http_client)
        self._prober = EnvironmentProber(self._http_client, env=env)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    @property
    def api_key(self) -> str | None:
        """The configured API key, for callers using API-key-only access."""
        return self.config.api_key

    @property
    def environment(self) -> EnvironmentFlags:
        """Platform flags probed so far."""
        return self._prober.environment

    async def authorize_request(self, req_opts: Mapping[str, Any]) -> dict[str, Any]:
        """Return a copy of `req_opts` carrying an `Authorization: Bearer` header."""
        return await self._authorizer.authorize_request(req_opts)

    async def get_auth_client(self) -> AuthClient:
        return await self._resolver.resolve()

    async def get_token(self) -> str:
        return await self._token_provider.get_token()

    async def get_credentials(self) -> CredentialsRecord:
        return await self._resolver.get_credentials()

    async def get_project_id(self) -> str | None:
        return await self._resolver.get_project_id()

    async def sign(self, data: bytes | str) -> str:
        """Sign `data` locally if a private key is available, otherwise via IAM signBlob."""
        return await self._signer.sign(data)

    async def get_environment(self) -> EnvironmentFlags:
        return await self._prober.get_environment()

    async def is_app_engine(self) -> bool:
        return await self._prober.is_app_engine()

    async def is_cloud_function(self) -> bool:
        return await self._prober.is_cloud_function()

    async def is_compute_engine(self) -> bool:
        return await self._prober.is_compute_engine()

    async def is_container_engine(self) -> bool:
        return await self._prober.is_container_engine()
