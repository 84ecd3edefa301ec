"""Sign arbitrary data as the resolved service account.

When the credentials carry a private key the data is signed locally with
RSA-SHA256. Otherwise the IAM signBlob API signs it on the service account's
behalf. The branch is fixed once the credentials are known; a failure on one
path never falls back to the other.
"""

import base64
import logging

import httpx
from google.auth import crypt

from google_auto_auth.auth.exceptions import MissingClientEmailError, MissingProjectIdError
from google_auto_auth.auth.resolver import AuthClientResolver, CredentialsRecord
from google_auto_auth.auth.tokens import RequestAuthorizer
from google_auto_auth.errors.handler import raise_for_signing_status

logger = logging.getLogger(__name__)

SIGN_BLOB_URL = "https://iam.{service_host}/v1/projects/{project_id}/serviceAccounts/{client_email}:signBlob"


def sign_locally(data: bytes, private_key: str) -> str:
    """Return the base64-encoded RSA-SHA256 signature of `data`."""
    signer = crypt.RSASigner.from_string(private_key)
    return base64.b64encode(signer.sign(data)).decode("ascii")


class Signer:
    """Choose between local and remote signing based on the resolved credentials.

    Args:
        resolver: Source of credentials and project ID.
        authorizer: Adds the bearer token to the signBlob request.
        http_client: Client the signBlob request is sent with.
    """

    def __init__(
        self,
        resolver: AuthClientResolver,
        authorizer: RequestAuthorizer,
        http_client: httpx.AsyncClient,
    ):
        self._resolver = resolver
        self._authorizer = authorizer
        self._http_client = http_client

    async def sign(self, data: bytes | str) -> str:
        """Sign `data` and return the signature.

        Args:
            data: Bytes to sign; text is UTF-8 encoded first.

        Returns:
            Base64-encoded signature.

        Raises:
            CredentialsUnavailableError: If no service-account identity can be derived.
            MissingProjectIdError: If remote signing is needed and no project ID is known.
            MissingClientEmailError: If remote signing is needed and the credentials lack an email.
            RemoteSigningError: If the signBlob API rejects the request.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        credentials = await self._resolver.get_credentials()

        if credentials.has_private_key:
            logger.debug(f"Signing {len(data)} bytes locally as {credentials.client_email}")
            return sign_locally(data, credentials.private_key)

        return await self._sign_remotely(data, credentials)

    async def _sign_remotely(self, data: bytes, credentials: CredentialsRecord) -> str:
        project_id = await self._resolver.get_project_id()
        if not project_id:
            raise MissingProjectIdError()

        if not credentials.client_email:
            raise MissingClientEmailError(project_id=project_id)

        url = SIGN_BLOB_URL.format(
            service_host=self._resolver.config.service_host,
            project_id=project_id,
            client_email=credentials.client_email,
        )
        logger.debug(f"Signing {len(data)} bytes remotely via {url}")

        req_opts = await self._authorizer.authorize_request(
            {
                "method": "POST",
                "url": url,
                "json": {"bytesToSign": base64.b64encode(data).decode("ascii")},
            }
        )
        response = await self._http_client.request(**req_opts)
        raise_for_signing_status(response)

        return response.json()["signature"]
