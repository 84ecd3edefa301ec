"""Custom exceptions for credential resolution and signing preconditions.

Every exception here carries a stable `code` so callers can branch on the
failure kind without parsing message text.

Example:
    ```python
    from google_auto_auth.auth.exceptions import CredentialError, MissingScopeError

    try:
        client = await resolver.resolve()
    except MissingScopeError:
        ...
    except CredentialError as e:
        print(f"Credential problem ({e.code}): {e}")
    ```
"""


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.

    Attributes:
        code: Stable machine-readable error code.
    """

    code = "CREDENTIAL_ERROR"


class MissingScopeError(CredentialError):
    """Raised when the resolved client requires scopes but none are configured.

    Example:
        ```python
        auth = AutoAuth(AuthConfig(key_filename="key.json"))
        await auth.get_token()  # raises MissingScopeError
        ```
    """

    code = "MISSING_SCOPE"

    def __init__(self, message: str = "Scopes are required for this request."):
        super().__init__(message)


class CredentialsUnavailableError(CredentialError):
    """Raised when no usable service-account email or key can be derived."""

    code = "CREDENTIALS_UNAVAILABLE"

    def __init__(self, message: str = "Could not get credentials without a JSON, pem, or p12 keyfile."):
        super().__init__(message)


class MissingProjectIdError(CredentialError):
    """Raised when remote signing needs a project ID and none is resolvable."""

    code = "MISSING_PROJECT_ID"

    def __init__(self, message: str = "Cannot sign data without a project ID."):
        super().__init__(message)


class MissingClientEmailError(CredentialError):
    """Raised when remote signing needs a service-account email and the credentials lack one.

    Attributes:
        project_id: The project the signing request would have targeted.
    """

    code = "MISSING_CLIENT_EMAIL"

    def __init__(self, message: str = "Cannot sign data without `client_email`.", project_id: str | None = None):
        super().__init__(message)
        self.project_id = project_id
