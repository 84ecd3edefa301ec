"""Resolve exactly one authorized client per configuration.

Source precedence (evaluated once):
1. Inline `credentials` JSON object
2. Key file (`key_filename` / `key_file`): parsed as JSON if possible,
   otherwise treated as raw PEM/P12 key material for a JWT client
3. Ambient (Application Default) credentials

Resolution is single-flight: concurrent callers share one in-flight
resolution and all observe its outcome. Success is cached for the lifetime of
the resolver; failure is not, so the next call starts a fresh attempt.

Example:
    ```python
    resolver = AuthClientResolver(AuthConfig(key_filename="key.json", scopes=["https://www.googleapis.com/auth/cloud-platform"]))
    client = await resolver.resolve()
    project_id = await resolver.get_project_id()
    record = await resolver.get_credentials()
    ```
"""

import asyncio
import json
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from google_auto_auth.auth.clients import (
    AuthClient,
    Authorizable,
    AuthLibrary,
    CredentialSource,
    GoogleAuthLibrary,
    Scopable,
)
from google_auto_auth.auth.exceptions import CredentialsUnavailableError, MissingScopeError
from google_auto_auth.config import AuthConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CredentialsRecord:
    """Service-account identity used for signing."""

    client_email: str | None
    private_key: str | None = None

    @property
    def has_private_key(self) -> bool:
        return bool(self.private_key)

    def __repr__(self) -> str:
        return f"CredentialsRecord(client_email={self.client_email!r}, private_key={'***' if self.private_key else None})"


class _SingleFlight:
    """One in-flight task shared by every concurrent caller.

    A task that fails or is cancelled is forgotten so the next call starts a
    fresh attempt.
    """

    def __init__(self, create: Callable[[], Awaitable[T]]):
        self._create = create
        self._pending: asyncio.Task | None = None

    async def run(self) -> T:
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._create())
            self._pending.add_done_callback(self._on_settled)

        # Shielded so a cancelled waiter cannot cancel the work other callers share
        return await asyncio.shield(self._pending)

    def _on_settled(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is not None:
            self._pending = None


class AuthClientResolver:
    """Single-flight, memoized resolution of an auth client.

    Attributes:
        config: The configuration credentials are sourced from.
    """

    def __init__(self, config: AuthConfig, library: AuthLibrary | None = None):
        self.config = config
        self._library = library if library is not None else GoogleAuthLibrary()
        self._client: AuthClient | None = None
        self._client_flight = _SingleFlight(self._create_client)
        self._project_id = config.project_id
        self._credentials: CredentialsRecord | None = None
        self._credentials_flight = _SingleFlight(self._derive_credentials)

    @property
    def client(self) -> AuthClient | None:
        """The resolved client, or None if resolution has not succeeded yet."""
        return self._client

    async def resolve(self) -> AuthClient:
        """Return the auth client, creating it on first use.

        Returns:
            The resolved client; the same object on every call.

        Raises:
            MissingScopeError: If the client needs scopes and none are configured.
            OSError: If the key file cannot be read.
        """
        if self._client is not None:
            return self._client

        return await self._client_flight.run()

    async def _create_client(self) -> AuthClient:
        config = self.config
        key_path = config.key_path

        if config.credentials is not None:
            logger.debug("Creating auth client from inline credentials")
            client, project_id = await self._library.from_json(config.credentials)

        elif key_path:
            key_file = os.path.abspath(os.path.expanduser(os.path.expandvars(key_path)))
            contents = await asyncio.to_thread(Path(key_file).read_bytes)

            try:
                info = json.loads(contents)
            except ValueError:
                logger.debug(f"Key file {key_file} is not JSON, creating JWT client")
                client, project_id = self._library.jwt(key_file=key_file, email=config.email), None
            else:
                logger.debug(f"Creating auth client from JSON key file {key_file}")
                client, project_id = await self._library.from_json(info)

        else:
            logger.debug("Creating auth client from application default credentials")
            client, project_id = await self._library.get_application_default()

        if isinstance(client, Scopable) and client.create_scoped_required() and not config.scopes:
            raise MissingScopeError()

        client.scopes = list(config.scopes)
        self._project_id = config.project_id or project_id or client.project_id
        self._client = client

        logger.info(f"Resolved auth client {type(client).__name__} (project: {self._project_id})")
        return client

    async def get_project_id(self) -> str | None:
        """Return the project ID, resolving the client only if it is not configured."""
        if self._project_id:
            return self._project_id

        await self.resolve()
        return self._project_id

    async def get_credentials(self) -> CredentialsRecord:
        """Derive the service-account email and private key from the client.

        If the client does not expose both directly and supports authorization,
        it is authorized once and whatever it then reports is returned; the
        email or key may be missing, which the signer reports. Concurrent
        callers share a single authorization.

        Raises:
            CredentialsUnavailableError: If the client can neither report
                credentials directly nor be authorized.
        """
        if self._credentials is not None:
            return self._credentials

        return await self._credentials_flight.run()

    async def _derive_credentials(self) -> CredentialsRecord:
        client = await self.resolve()
        source = client if isinstance(client, CredentialSource) else None

        if source is None or not (source.email and source.key):
            if not isinstance(client, Authorizable):
                raise CredentialsUnavailableError()

            await client.authorize()
            if not isinstance(client, CredentialSource):
                raise CredentialsUnavailableError()
            source = client

        self._credentials = CredentialsRecord(client_email=source.email, private_key=source.key)
        return self._credentials
