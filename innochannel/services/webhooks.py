"""Webhook registration and payload handling."""

from typing import Any, Dict, List, Optional

from innochannel.config.client_config import is_valid_url
from innochannel.events.event import KNOWN_EVENTS, Event
from innochannel.services.base import BaseService, FieldErrors, is_int
from innochannel.webhook.payload import parse_verified_payload
from innochannel.webhook.processor import create_response
from innochannel.webhook.signature import Payload, verify_signature

SECRET_MIN_LENGTH = 16
SECRET_MAX_LENGTH = 64


class WebhookService(BaseService):
    """Service for ``/api/webhooks``."""

    base_path = "/api/webhooks"

    def create(self, webhook_data: Dict[str, Any]) -> Dict[str, Any]:
        """Register a webhook.

        Args:
            webhook_data: ``url`` and ``events`` are required; ``secret``,
                ``timeout``, ``retry_attempts`` and ``active`` are optional

        Returns:
            The created webhook record, including its ``id``

        Raises:
            ValidationError: If the webhook data is invalid
        """
        self._raise_if_errors(
            "Webhook validation failed", self._webhook_errors(webhook_data, is_create=True)
        )
        webhook = self._unwrap(self.client.post(self.base_path, webhook_data))
        self.logger.info("webhook_created", webhook_id=(webhook or {}).get("id"))
        return webhook

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        webhooks = self._unwrap(self.client.get(self.base_path, filters))
        return webhooks if isinstance(webhooks, list) else []

    def get(self, webhook_id: str) -> Dict[str, Any]:
        return self._unwrap(self.client.get(f"{self.base_path}/{webhook_id}"))

    def update(self, webhook_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        self._raise_if_errors(
            "Webhook update validation failed", self._webhook_errors(update_data, is_create=False)
        )
        return self._unwrap(self.client.put(f"{self.base_path}/{webhook_id}", update_data))

    def delete(self, webhook_id: str) -> bool:
        self.client.delete(f"{self.base_path}/{webhook_id}")
        return True

    def test(self, webhook_id: str, test_data: Optional[Dict[str, Any]] = None) -> Any:
        """Ask the API to send a test delivery to the webhook."""
        return self.client.post(f"{self.base_path}/{webhook_id}/test", test_data)

    def get_logs(self, webhook_id: str, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(f"{self.base_path}/{webhook_id}/logs", filters)

    def retry(self, webhook_id: str, log_id: str) -> Any:
        """Retry a failed delivery."""
        return self.client.post(f"{self.base_path}/{webhook_id}/logs/{log_id}/retry")

    def set_active(self, webhook_id: str, active: bool) -> Dict[str, Any]:
        return self._unwrap(
            self.client.patch(f"{self.base_path}/{webhook_id}", {"active": bool(active)})
        )

    def get_available_events(self) -> List[Any]:
        events = self._unwrap(self.client.get(f"{self.base_path}/events"))
        return events if isinstance(events, list) else []

    # Incoming payloads

    @staticmethod
    def validate_signature(payload: Payload, signature: str, secret: str) -> bool:
        return verify_signature(payload, signature, secret)

    @staticmethod
    def process_payload(payload: Payload, signature: Optional[str], secret: str) -> Event:
        return parse_verified_payload(payload, signature, secret)

    @staticmethod
    def create_response(
        success: bool, message: Optional[str] = None, data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return create_response(success, message, data)

    # Validation

    def _webhook_errors(self, data: Dict[str, Any], is_create: bool) -> FieldErrors:
        errors: FieldErrors = {}

        if is_create and not data.get("url"):
            errors["url"] = ["URL is required"]
        elif "url" in data and not self._is_http_url(data["url"]):
            errors["url"] = ["URL must be a valid HTTP or HTTPS URL"]

        if is_create and "events" not in data:
            errors["events"] = ["Events are required"]
        elif "events" in data:
            events = data["events"]
            if not isinstance(events, list) or not events:
                errors["events"] = ["Events must be a non-empty list"]
            else:
                unknown = [event for event in events if event not in KNOWN_EVENTS]
                if unknown:
                    errors["events"] = [f"Invalid events: {', '.join(map(str, unknown))}"]

        if data.get("secret") is not None:
            secret = data["secret"]
            if not isinstance(secret, str) or not (
                SECRET_MIN_LENGTH <= len(secret) <= SECRET_MAX_LENGTH
            ):
                errors["secret"] = [
                    f"Secret must be between {SECRET_MIN_LENGTH} and {SECRET_MAX_LENGTH} characters"
                ]

        if "timeout" in data and (not is_int(data["timeout"]) or not 1 <= data["timeout"] <= 30):
            errors["timeout"] = ["Timeout must be an integer between 1 and 30 seconds"]

        if "retry_attempts" in data and (
            not is_int(data["retry_attempts"]) or not 0 <= data["retry_attempts"] <= 5
        ):
            errors["retry_attempts"] = ["Retry attempts must be an integer between 0 and 5"]

        return errors

    @staticmethod
    def _is_http_url(url: Any) -> bool:
        return isinstance(url, str) and url.startswith(("http://", "https://")) and is_valid_url(url)
