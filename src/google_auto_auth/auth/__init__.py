"""Credential resolution and request authorization.

This module provides:
- Single-flight auth client resolution (inline JSON → key file → ambient credentials)
- Capability protocols over heterogeneous credential providers
- Bearer token helpers

Example:
    ```python
    from google_auto_auth.auth import AuthClientResolver, RequestAuthorizer, TokenProvider
    from google_auto_auth.config import AuthConfig

    resolver = AuthClientResolver(AuthConfig(key_filename="key.json", scopes=["https://www.googleapis.com/auth/cloud-platform"]))
    authorizer = RequestAuthorizer(TokenProvider(resolver))
    req_opts = await authorizer.authorize_request({"method": "GET", "url": "https://example.googleapis.com/"})
    ```
"""

from google_auto_auth.auth.clients import (
    Authorizable,
    AuthClient,
    AuthLibrary,
    CredentialSource,
    GoogleAuthClient,
    GoogleAuthLibrary,
    JWTClient,
    Scopable,
)
from google_auto_auth.auth.exceptions import (
    CredentialError,
    CredentialsUnavailableError,
    MissingClientEmailError,
    MissingProjectIdError,
    MissingScopeError,
)
from google_auto_auth.auth.resolver import AuthClientResolver, CredentialsRecord
from google_auto_auth.auth.tokens import RequestAuthorizer, TokenProvider

__all__ = [
    "AuthClient",
    "AuthClientResolver",
    "AuthLibrary",
    "Authorizable",
    "CredentialError",
    "CredentialSource",
    "CredentialsRecord",
    "CredentialsUnavailableError",
    "GoogleAuthClient",
    "GoogleAuthLibrary",
    "JWTClient",
    "MissingClientEmailError",
    "MissingProjectIdError",
    "MissingScopeError",
    "RequestAuthorizer",
    "Scopable",
    "TokenProvider",
]
