"""Parsing of verified webhook payloads."""

import json
from typing import Any, Dict, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from innochannel.events.event import Event
from innochannel.exceptions import SignatureError, ValidationError
from innochannel.webhook.signature import Payload, verify_signature


class WebhookPayload(BaseModel):
    """Envelope of a webhook delivery."""

    model_config = ConfigDict(extra="ignore")

    event: str = Field(..., min_length=1)
    object_type: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


def parse_verified_payload(raw: Payload, signature: Optional[str], secret: str) -> Event:
    """Verify and parse a raw webhook body into an :class:`Event`.

    The signature is checked before anything in the body is looked at.

    Raises:
        SignatureError: If the signature does not match
        ValidationError: If the JSON or the payload shape is invalid
    """
    if not verify_signature(raw, signature or "", secret):
        raise SignatureError()

    try:
        decoded = json.loads(raw)
    except ValueError as e:
        raise ValidationError(
            "Invalid JSON payload", status_code=400, errors={"payload": [str(e)]}
        ) from e

    if not isinstance(decoded, dict):
        raise ValidationError(
            "Invalid webhook payload",
            status_code=400,
            errors={"payload": ["Payload must be a JSON object"]},
        )

    try:
        payload = WebhookPayload.model_validate(decoded)
    except pydantic.ValidationError as e:
        errors: Dict[str, Any] = {}
        for item in e.errors():
            field = ".".join(str(part) for part in item["loc"]) or "payload"
            errors.setdefault(field, []).append(item["msg"])
        raise ValidationError("Invalid webhook payload", status_code=400, errors=errors) from e

    return Event(
        name=payload.event,
        data=payload.data,
        object_type=payload.object_type,
        source="webhook",
    )
