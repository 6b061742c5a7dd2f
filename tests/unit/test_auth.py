"""Tests for request authentication and secret redaction."""

import pytest

from innochannel.auth import REDACTED, ApiKeyAuthentication, mask_secret, sanitize_headers
from innochannel.exceptions import AuthenticationError


def test_bearer_header():
    auth = ApiKeyAuthentication("test_api_key_123")

    headers = auth.authenticate({"Accept": "application/json"})

    assert headers == {"Accept": "application/json", "Authorization": "Bearer test_api_key_123"}


def test_custom_header_sends_raw_key():
    auth = ApiKeyAuthentication("test_api_key_123", header_name="X-API-Key")

    assert auth.authenticate({})["X-API-Key"] == "test_api_key_123"


def test_authenticate_does_not_mutate_input():
    original = {"Accept": "application/json"}

    ApiKeyAuthentication("test_api_key_123").authenticate(original)

    assert "Authorization" not in original


def test_empty_key_rejected():
    with pytest.raises(AuthenticationError):
        ApiKeyAuthentication("")


def test_is_valid():
    assert ApiKeyAuthentication("0123456789").is_valid()
    assert not ApiKeyAuthentication("short").is_valid()


@pytest.mark.parametrize(
    "value,masked",
    [("abcd", "****"), ("0123456789abcdef", "0123********cdef")],
)
def test_mask_secret(value, masked):
    assert mask_secret(value) == masked


def test_sanitize_headers_is_case_insensitive():
    auth = ApiKeyAuthentication("test_api_key_123", header_name="X-Custom-Key")
    headers = {
        "authorization": "Bearer abc",
        "X-Custom-Key": "abc",
        "Accept": "application/json",
    }

    sanitized = sanitize_headers(headers, auth.sensitive_headers)

    assert sanitized == {
        "authorization": REDACTED,
        "X-Custom-Key": REDACTED,
        "Accept": "application/json",
    }
