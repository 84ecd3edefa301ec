"""Configuration for credential resolution.

`AuthConfig` is the immutable description of where credentials come from. It
can be built directly or with `load_config()`, which fills unset fields from
environment variables and an optional .env file.

Resolution order for each field (highest to lowest priority):
1. Explicitly provided keyword argument
2. Environment variable (first match of the listed names)
3. .env file (python-dotenv, loaded into the environment)
4. Default value

Example:
    ```python
    from google_auto_auth.config import AuthConfig, load_config

    # Explicit configuration
    config = AuthConfig(key_filename="keys/service-account.json", scopes=["https://www.googleapis.com/auth/devstorage.read_only"])

    # From GOOGLE_AUTO_AUTH_* / GOOGLE_CLOUD_PROJECT environment variables
    config = load_config()

    # Environment, with an explicit override
    config = load_config(project_id="my-project")
    ```

Security Considerations:
    - Tokens and API keys are never logged in full (masked with ***)
    - Only source information is logged (env var name, explicit parameter, etc.)
    - Thread-safe dotenv loading with lock
"""

import logging
import os
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_HOST = "googleapis.com"

KEY_FILENAME_ENV_VARS = ("GOOGLE_AUTO_AUTH_KEY_FILENAME",)
EMAIL_ENV_VARS = ("GOOGLE_AUTO_AUTH_EMAIL",)
SCOPES_ENV_VARS = ("GOOGLE_AUTO_AUTH_SCOPES",)
PROJECT_ID_ENV_VARS = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT")
TOKEN_ENV_VARS = ("GOOGLE_AUTO_AUTH_TOKEN",)
API_KEY_ENV_VARS = ("GOOGLE_API_KEY",)


@dataclass(frozen=True)
class AuthConfig:
    """Immutable description of how credentials are sourced.

    At most one of `credentials`, the key file and ambient credentials is used,
    in that order. `token` bypasses resolution entirely.

    Attributes:
        credentials: Inline service-account (or other credential) JSON object.
        key_filename: Path to a JSON, PEM or P12 key file.
        key_file: Alias for `key_filename`; `key_filename` wins if both are set.
        email: Service-account email, required alongside PEM/P12 key files.
        scopes: OAuth scopes, order preserved.
        project_id: Explicit project ID override.
        token: Pre-obtained access token.
        api_key: API key for API-key-only access.
        service_host: Domain used to build the IAM endpoint.
    """

    credentials: Mapping[str, Any] | None = None
    key_filename: str | None = None
    key_file: str | None = None
    email: str | None = None
    scopes: tuple[str, ...] = field(default_factory=tuple)
    project_id: str | None = None
    token: str | None = None
    api_key: str | None = None
    service_host: str = DEFAULT_SERVICE_HOST

    def __post_init__(self):
        if isinstance(self.scopes, str):
            object.__setattr__(self, "scopes", (self.scopes,))
        elif not isinstance(self.scopes, tuple):
            object.__setattr__(self, "scopes", tuple(self.scopes or ()))

    @property
    def key_path(self) -> str | None:
        """The configured key file path, whichever alias supplied it."""
        return self.key_filename or self.key_file

    def __repr__(self) -> str:
        return (
            f"AuthConfig(credentials={'***' if self.credentials else None}, "
            f"key_path={self.key_path!r}, email={self.email!r}, scopes={self.scopes!r}, "
            f"project_id={self.project_id!r}, token={'***' if self.token else None}, "
            f"api_key={'***' if self.api_key else None}, service_host={self.service_host!r})"
        )


def parse_scopes(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalise scopes given as a comma/whitespace separated string or an iterable."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(scope for scope in re.split(r"[\s,]+", value) if scope)
    return tuple(value)


class SettingsResolver:
    """Resolve individual settings from explicit values, the environment and .env files.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.

    Example:
        ```python
        resolver = SettingsResolver(load_dotenv=False)
        project_id = resolver.resolve(env_var_names=("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"), mask_in_logs=False)
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize settings resolver.

        Args:
            dotenv_path: Path to .env file. If None, searches parent directories
                for .env file (default behavior of python-dotenv).
            load_dotenv: Whether to load .env file. Set to False to skip
                .env file loading (useful for testing or when not using .env).
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once, even with concurrent callers."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for configuration")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            # Mark as attempted either way; a broken .env is not fatal
            self._dotenv_loaded = True

    def _mask(self, value: str | None) -> str:
        if value is None:
            return "None"
        return "***"

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_names: Sequence[str] = (),
        default: str | None = None,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a setting from multiple sources.

        Resolution order (first match wins):
        1. Explicitly provided `value` parameter
        2. First environment variable in `env_var_names` that is set
        3. Default value

        Args:
            value: Explicitly provided value (highest priority).
            env_var_names: Environment variable names to check, in order.
            default: Default value if not found elsewhere.
            mask_in_logs: If True (default), masks values in log messages.

        Returns:
            Resolved value, or None if not found.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        else:
            for env_var_name in env_var_names:
                if os.environ.get(env_var_name):
                    result = os.environ[env_var_name]
                    source = f"environment variable '{env_var_name}'"
                    break
            else:
                if default is not None:
                    result = default
                    source = "default value"

        if result is not None:
            shown = self._mask(result) if mask_in_logs else result
            logger.debug(f"Resolved setting from {source}: {shown}")

        return result


def load_config(
    *,
    dotenv_path: str | None = None,
    load_dotenv: bool = True,
    credentials: Mapping[str, Any] | None = None,
    key_filename: str | None = None,
    key_file: str | None = None,
    email: str | None = None,
    scopes: str | Iterable[str] | None = None,
    project_id: str | None = None,
    token: str | None = None,
    api_key: str | None = None,
    service_host: str = DEFAULT_SERVICE_HOST,
) -> AuthConfig:
    """Build an `AuthConfig`, filling unset fields from the environment.

    Args:
        dotenv_path: Optional .env file to load before reading the environment.
        load_dotenv: Whether to load a .env file at all.
        credentials: Inline credential JSON object. Never read from the environment.
        key_filename: Key file path; falls back to GOOGLE_AUTO_AUTH_KEY_FILENAME.
        key_file: Alias for key_filename.
        email: Service-account email; falls back to GOOGLE_AUTO_AUTH_EMAIL.
        scopes: Scopes; falls back to GOOGLE_AUTO_AUTH_SCOPES.
        project_id: Project ID; falls back to GOOGLE_CLOUD_PROJECT then GCLOUD_PROJECT.
        token: Static access token; falls back to GOOGLE_AUTO_AUTH_TOKEN.
        api_key: API key; falls back to GOOGLE_API_KEY.
        service_host: Domain for the IAM endpoint.

    Returns:
        The resolved configuration.
    """
    resolver = SettingsResolver(dotenv_path=dotenv_path, load_dotenv=load_dotenv)

    if key_filename is None and key_file is None:
        key_filename = resolver.resolve(env_var_names=KEY_FILENAME_ENV_VARS, mask_in_logs=False)

    if scopes is None:
        scopes = resolver.resolve(env_var_names=SCOPES_ENV_VARS, mask_in_logs=False)

    return AuthConfig(
        credentials=credentials,
        key_filename=key_filename,
        key_file=key_file,
        email=resolver.resolve(value=email, env_var_names=EMAIL_ENV_VARS, mask_in_logs=False),
        scopes=parse_scopes(scopes),
        project_id=resolver.resolve(value=project_id, env_var_names=PROJECT_ID_ENV_VARS, mask_in_logs=False),
        token=resolver.resolve(value=token, env_var_names=TOKEN_ENV_VARS),
        api_key=resolver.resolve(value=api_key, env_var_names=API_KEY_ENV_VARS),
        service_host=service_host,
    )
