"""Webhook verification, parsing and handling."""

from innochannel.webhook.payload import WebhookPayload, parse_verified_payload
from innochannel.webhook.processor import (
    SIGNATURE_HEADER,
    WebhookProcessor,
    WebhookResult,
    create_response,
)
from innochannel.webhook.signature import compute_signature, verify_signature

__all__ = [
    "SIGNATURE_HEADER",
    "WebhookPayload",
    "WebhookProcessor",
    "WebhookResult",
    "compute_signature",
    "create_response",
    "parse_verified_payload",
    "verify_signature",
]
