"""Webhook request handling independent of any web framework."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog

from innochannel.events.event import Event
from innochannel.events.manager import EventManager
from innochannel.exceptions import SignatureError, ValidationError
from innochannel.metrics.prometheus import metrics
from innochannel.webhook.payload import parse_verified_payload
from innochannel.webhook.signature import Payload

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Innochannel-Signature"


def create_response(
    success: bool, message: Optional[str] = None, data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Build the JSON body returned to the channel manager."""
    if message is None:
        message = "Webhook processed successfully" if success else "Webhook processing failed"
    return {
        "success": success,
        "message": message,
        "data": data or {},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@dataclass
class WebhookResult:
    """HTTP status and body produced for a webhook request."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status_code == 200


class WebhookProcessor:
    """Verifies incoming webhooks and dispatches them as events."""

    def __init__(
        self,
        secret: str,
        events: Optional[EventManager] = None,
        signature_header: str = SIGNATURE_HEADER,
    ):
        if not secret:
            raise ValueError("Webhook secret cannot be empty")
        self.secret = secret
        self.events = events or EventManager()
        self.signature_header = signature_header

        self.received_counter = metrics.register_counter(
            "innochannel_webhooks_received_total",
            "Total number of webhooks received",
            ["outcome"],
        )

    def parse(self, raw: Payload, signature: Optional[str]) -> Event:
        """Verify ``raw`` against ``signature`` and return the event it carries."""
        return parse_verified_payload(raw, signature, self.secret)

    def handle(self, raw: Payload, signature: Optional[str]) -> WebhookResult:
        """Verify, parse and dispatch a webhook request.

        Never raises; every failure is mapped to a status code and a body.
        """
        if not signature:
            logger.warning("webhook_rejected", reason="missing_signature")
            return self._result("missing_signature", 401, "Missing signature")

        try:
            event = self.parse(raw, signature)
        except SignatureError:
            logger.warning("webhook_rejected", reason="invalid_signature")
            return self._result("invalid_signature", 400, "Invalid signature")
        except ValidationError as e:
            logger.warning("webhook_rejected", reason="invalid_payload", errors=e.errors)
            return self._result("invalid_payload", 400, "Invalid payload", {"errors": e.errors})

        logger.info("webhook_received", event_name=event.name, object_type=event.object_type)

        try:
            handled = self.events.dispatch(event)
        except Exception:
            logger.exception("webhook_processing_failed", event_name=event.name)
            return self._result("error", 500, "Webhook processing failed")

        return self._result(
            "success", 200, "Webhook processed successfully", {"event": event.name, "handled": handled}
        )

    def _result(
        self, outcome: str, status_code: int, message: str, data: Optional[Dict[str, Any]] = None
    ) -> WebhookResult:
        self.received_counter.labels(outcome=outcome).inc()
        return WebhookResult(status_code, create_response(status_code == 200, message, data))
