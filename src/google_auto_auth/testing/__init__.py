"""Testing utilities for code built on google-auto-auth.

Test doubles for the auth-library seam, so resolution, token and signing
behaviour can be exercised without google-auth or the network.

Example:
    ```python
    from google_auto_auth import AutoAuth, AuthConfig
    from google_auto_auth.testing import FakeAuthClient, FakeAuthLibrary


    async def test_token_comes_from_client():
        library = FakeAuthLibrary(client=FakeAuthClient(token="abc"))
        auth = AutoAuth(AuthConfig(), library=library)
        assert await auth.get_token() == "abc"
    ```
"""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any


class FakeAuthClient:
    """Auth client without an authorization step.

    Attributes:
        token_requests: Number of `get_access_token()` calls.
    """

    def __init__(
        self,
        *,
        email: str | None = None,
        key: str | None = None,
        project_id: str | None = None,
        scoped_required: bool = False,
        token: str = "fake-token",
    ):
        self.email = email
        self.key = key
        self.project_id = project_id
        self.scoped_required = scoped_required
        self.token = token
        self.scopes: list[str] | None = None
        self.token_requests = 0

    def create_scoped_required(self) -> bool:
        return self.scoped_required

    async def get_access_token(self) -> str:
        self.token_requests += 1
        return self.token


class FakeAuthorizableClient(FakeAuthClient):
    """Auth client whose email and key only appear after `authorize()`.

    Attributes:
        authorize_calls: Number of `authorize()` calls.
    """

    def __init__(
        self,
        *,
        authorized_email: str | None = None,
        authorized_key: str | None = None,
        key_file: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.authorized_email = authorized_email
        self.authorized_key = authorized_key
        self.key_file = key_file
        self.authorize_calls = 0

    async def authorize(self) -> None:
        self.authorize_calls += 1
        if self.authorized_email is not None:
            self.email = self.authorized_email
        if self.authorized_key is not None:
            self.key = self.authorized_key


class FakeAuthLibrary:
    """Auth library returning a preset client.

    Args:
        client: Client returned by `from_json` and `get_application_default`.
        project_id: Project ID reported alongside the client.
        failures: Exceptions raised by successive constructor calls before
            they start succeeding.
        delay: Seconds each constructor call waits before settling.

    Attributes:
        calls: `(method, arguments)` for every constructor call, in order.
    """

    def __init__(
        self,
        *,
        client: FakeAuthClient | None = None,
        project_id: str | None = None,
        failures: Iterable[Exception] = (),
        delay: float = 0.0,
    ):
        self.client = client if client is not None else FakeAuthClient()
        self.project_id = project_id
        self.failures = list(failures)
        self.delay = delay
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def _settle(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.failures:
            raise self.failures.pop(0)

    async def from_json(self, info: Mapping[str, Any]) -> tuple[FakeAuthClient, str | None]:
        self.calls.append(("from_json", {"info": info}))
        await self._settle()
        return self.client, self.project_id

    async def get_application_default(self) -> tuple[FakeAuthClient, str | None]:
        self.calls.append(("get_application_default", {}))
        await self._settle()
        return self.client, self.project_id

    def jwt(self, *, key_file: str, email: str | None) -> FakeAuthorizableClient:
        self.calls.append(("jwt", {"key_file": key_file, "email": email}))
        return FakeAuthorizableClient(email=email, key_file=key_file, scoped_required=True)


__all__ = ["FakeAuthClient", "FakeAuthLibrary", "FakeAuthorizableClient"]
