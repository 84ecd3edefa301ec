"""Auth clients and the seam to the google-auth library.

Credential providers come in different shapes: a service-account client can
report its email and key directly, a JWT client built from a PEM/P12 file only
knows its key after it has been authorized, and ambient credentials may know
neither. Rather than probing for attributes ad hoc, the resolver queries the
small capability protocols defined here:

- `Scopable`: can report whether scopes are required before use
- `Authorizable`: has a one-time side-effecting authorization step
- `CredentialSource`: exposes a service-account email and private key

`GoogleAuthLibrary` is the default `AuthLibrary`; tests substitute the fakes in
`google_auto_auth.testing`.
"""

import asyncio
import json
import logging
import os
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import google.auth
from cryptography.hazmat.primitives.serialization import Encoding, NoEncryption, PrivateFormat, pkcs12
from google.auth import crypt, environment_vars
from google.auth.credentials import Credentials, Scoped
from google.auth.transport.requests import Request
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Password Google applies to every P12 key it issues
P12_PASSWORD = b"notasecret"


@runtime_checkable
class Scopable(Protocol):
    def create_scoped_required(self) -> bool: ...


@runtime_checkable
class Authorizable(Protocol):
    async def authorize(self) -> None: ...


@runtime_checkable
class CredentialSource(Protocol):
    email: str | None
    key: str | None


class AuthClient(Protocol):
    """What every resolved client offers, whatever else it supports."""

    project_id: str | None
    scopes: Sequence[str] | None

    async def get_access_token(self) -> str: ...


class AuthLibrary(Protocol):
    """Constructors the resolver needs from the underlying auth library."""

    async def from_json(self, info: Mapping[str, Any]) -> tuple[AuthClient, str | None]: ...

    async def get_application_default(self) -> tuple[AuthClient, str | None]: ...

    def jwt(self, *, key_file: str, email: str | None) -> AuthClient: ...


def _read_json(path: str) -> dict[str, Any]:
    with open(path) as f:
        return json.load(f)


def load_private_key(key_file: str, password: bytes = P12_PASSWORD) -> str:
    """Read a PEM or P12 key file and return the private key as PEM text.

    Args:
        key_file: Absolute path to the key file.
        password: Password for P12 containers.

    Returns:
        PEM-encoded private key.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the P12 container is malformed or holds no private key.
    """
    with open(key_file, "rb") as f:
        data = f.read()

    if not key_file.lower().endswith(".p12") and b"-----BEGIN" in data:
        return data.decode("utf-8")

    private_key, _, _ = pkcs12.load_key_and_certificates(data, password)
    if private_key is None:
        raise ValueError(f"No private key found in P12 file: {key_file}")

    pem = private_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    return pem.decode("ascii")


class GoogleAuthClient:
    """Client wrapping a google-auth `Credentials` object.

    When built from a JSON object (inline, key file or the file named by
    GOOGLE_APPLICATION_CREDENTIALS), the object is retained so the
    service-account email and private key can be reported without a network
    call.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        info: Mapping[str, Any] | None = None,
        project_id: str | None = None,
    ):
        self.credentials = credentials
        self._info = dict(info) if info else {}
        self.project_id = project_id or self._info.get("project_id")
        self._scopes: list[str] | None = None

    @property
    def scopes(self) -> list[str] | None:
        return self._scopes

    @scopes.setter
    def scopes(self, scopes: Sequence[str] | None) -> None:
        self._scopes = list(scopes) if scopes else None
        if self._scopes and isinstance(self.credentials, Scoped):
            self.credentials = self.credentials.with_scopes(self._scopes)

    @property
    def email(self) -> str | None:
        return self._info.get("client_email") or getattr(self.credentials, "service_account_email", None)

    @property
    def key(self) -> str | None:
        return self._info.get("private_key")

    def create_scoped_required(self) -> bool:
        return isinstance(self.credentials, Scoped) and self.credentials.requires_scopes

    async def authorize(self) -> None:
        """Refresh the underlying credentials (network call)."""
        await asyncio.to_thread(self.credentials.refresh, Request())

    async def get_access_token(self) -> str:
        if not self.credentials.valid:
            await self.authorize()
        return self.credentials.token


class JWTClient:
    """Service-account client built from a raw PEM or P12 key file.

    The key is only read during `authorize()`; until then `key` is None.
    """

    def __init__(
        self,
        *,
        key_file: str,
        email: str | None = None,
        scopes: Sequence[str] | None = None,
        token_uri: str = GOOGLE_TOKEN_URI,
    ):
        self.key_file = key_file
        self.email = email
        self.key: str | None = None
        self.scopes = list(scopes) if scopes else None
        self.project_id: str | None = None
        self.token_uri = token_uri
        self._credentials: service_account.Credentials | None = None

    def create_scoped_required(self) -> bool:
        return not self.scopes

    async def authorize(self) -> None:
        """Load key material from `key_file` (no network call)."""
        if self.key is None:
            self.key = await asyncio.to_thread(load_private_key, self.key_file)
            logger.debug(f"Loaded private key from {self.key_file}")

    async def get_access_token(self) -> str:
        await self.authorize()
        if self._credentials is None:
            self._credentials = service_account.Credentials(
                crypt.RSASigner.from_string(self.key),
                self.email,
                self.token_uri,
                scopes=self.scopes,
            )
        if not self._credentials.valid:
            await asyncio.to_thread(self._credentials.refresh, Request())
        return self._credentials.token


class GoogleAuthLibrary:
    """`AuthLibrary` backed by google-auth."""

    async def from_json(self, info: Mapping[str, Any]) -> tuple[GoogleAuthClient, str | None]:
        credentials, project_id = google.auth.load_credentials_from_dict(dict(info))
        return GoogleAuthClient(credentials, info=info, project_id=project_id), project_id

    async def get_application_default(self) -> tuple[GoogleAuthClient, str | None]:
        credentials, project_id = await asyncio.to_thread(google.auth.default)

        # Service-account credentials do not keep the PEM; reread it from the key file for local signing
        info = None
        key_file = os.environ.get(environment_vars.CREDENTIALS)
        if isinstance(credentials, service_account.Credentials) and key_file:
            info = await asyncio.to_thread(_read_json, key_file)

        return GoogleAuthClient(credentials, info=info, project_id=project_id), project_id

    def jwt(self, *, key_file: str, email: str | None) -> JWTClient:
        if not email:
            logger.warning(f"Key file {key_file} is not JSON and no email is configured; token requests will fail")
        return JWTClient(key_file=key_file, email=email)
