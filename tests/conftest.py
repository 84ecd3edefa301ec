"""Pytest configuration and shared fixtures for google-auto-auth tests."""

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding, NoEncryption, PrivateFormat


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear configuration and platform environment variables before each test.

    This prevents test pollution when testing configuration loading and platform detection.
    """
    import os

    test_prefixes = ("GOOGLE_AUTO_AUTH_", "GAE_", "TEST_")
    test_names = ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT", "GOOGLE_API_KEY", "FUNCTION_NAME")

    for key in list(os.environ.keys()):
        if key.startswith(test_prefixes) or key in test_names:
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture(scope="session")
def rsa_private_key():
    """A freshly generated 2048-bit RSA key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    """The RSA key as PKCS#8 PEM text."""
    return rsa_private_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption()).decode("ascii")


@pytest.fixture
def service_account_info(private_key_pem) -> dict:
    """Service-account JSON as downloaded from the Cloud console."""
    return {
        "type": "service_account",
        "project_id": "json-project",
        "private_key_id": "key-id-123",
        "private_key": private_key_pem,
        "client_email": "robot@json-project.iam.gserviceaccount.com",
        "client_id": "1234567890",
        "token_uri": "https://oauth2.googleapis.com/token",
    }
