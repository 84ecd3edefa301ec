"""Local and remote (IAM signBlob) data signing."""

from google_auto_auth.signing.signer import SIGN_BLOB_URL, Signer, sign_locally

__all__ = ["SIGN_BLOB_URL", "Signer", "sign_locally"]
