"""Google Auto Auth - credential resolution and request signing for Google Cloud clients.

This library resolves application credentials from whatever the caller has:
- An explicit bearer token
- Inline service-account JSON
- A JSON, PEM or P12 key file
- Ambient (Application Default) credentials

It then attaches bearer tokens to outbound requests and signs blobs, locally
when a private key is available or through the IAM signBlob API otherwise.

Example:
    ```python
    from google_auto_auth import AutoAuth, load_config

    async with AutoAuth(load_config(scopes=["https://www.googleapis.com/auth/cloud-platform"])) as auth:
        req_opts = await auth.authorize_request({"method": "GET", "url": "https://storage.googleapis.com/..."})
        signature = await auth.sign(b"payload")
    ```
"""

from google_auto_auth.client import AutoAuth
from google_auto_auth.config import AuthConfig, load_config

__version__ = "0.1.0"

__all__ = ["AuthConfig", "AutoAuth", "__version__", "load_config"]
