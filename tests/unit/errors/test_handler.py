"""Tests for signBlob response error handling."""

import httpx
import pytest

from google_auto_auth.errors import APIError, RemoteSigningError, raise_for_signing_status


class TestRaiseForSigningStatus:
    def test_success_does_not_raise(self):
        raise_for_signing_status(httpx.Response(200, json={"signature": "sig"}))

    def test_structured_error(self):
        response = httpx.Response(
            400,
            json={"error": {"message": "bad", "code": 7, "status": "INVALID_ARGUMENT", "details": [{"a": 1}]}},
        )

        with pytest.raises(RemoteSigningError) as exc_info:
            raise_for_signing_status(response)

        error = exc_info.value
        assert error.message == "bad"
        assert error.code == 7
        assert error.status == "INVALID_ARGUMENT"
        assert error.details == {"code": 7, "status": "INVALID_ARGUMENT", "details": [{"a": 1}]}
        assert error.status_code == 400
        assert error.response is response

    def test_text_body_used_verbatim(self):
        with pytest.raises(RemoteSigningError) as exc_info:
            raise_for_signing_status(httpx.Response(503, text="Service Unavailable"))

        assert str(exc_info.value) == "Service Unavailable"
        assert exc_info.value.code is None

    def test_empty_body(self):
        with pytest.raises(RemoteSigningError) as exc_info:
            raise_for_signing_status(httpx.Response(500))

        assert str(exc_info.value) == "HTTP 500"

    def test_error_without_message_falls_back_to_text(self):
        with pytest.raises(RemoteSigningError) as exc_info:
            raise_for_signing_status(httpx.Response(400, json={"error": {"code": 3}}))

        assert '"code"' in str(exc_info.value)
        assert exc_info.value.code == 3

    def test_is_api_error(self):
        with pytest.raises(APIError):
            raise_for_signing_status(httpx.Response(401, json={"error": {"message": "unauthenticated"}}))
