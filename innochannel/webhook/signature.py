"""HMAC-SHA256 signatures for webhook payloads."""

import hashlib
import hmac
from typing import Union

Payload = Union[str, bytes]


def _to_bytes(value: Payload) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_signature(payload: Payload, secret: str) -> str:
    """Return the hex encoded HMAC-SHA256 of ``payload`` keyed by ``secret``."""
    return hmac.new(_to_bytes(secret), _to_bytes(payload), hashlib.sha256).hexdigest()


def verify_signature(payload: Payload, signature: str, secret: str) -> bool:
    """Check a webhook signature in constant time.

    Args:
        payload: Raw request body, exactly as received
        signature: Hex signature from the request header
        secret: Shared webhook secret

    Returns:
        True when the signature matches, False otherwise or when either the
        signature or the secret is empty
    """
    if not signature or not secret:
        return False
    expected = compute_signature(payload, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.strip().encode("utf-8"))
