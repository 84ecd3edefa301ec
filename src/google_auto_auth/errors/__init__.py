"""Error handling for remote Google API responses."""

from google_auto_auth.errors.exceptions import APIError, RemoteSigningError
from google_auto_auth.errors.handler import raise_for_signing_status
from google_auto_auth.errors.models import ErrorBody

__all__ = [
    "APIError",
    "ErrorBody",
    "RemoteSigningError",
    "raise_for_signing_status",
]
