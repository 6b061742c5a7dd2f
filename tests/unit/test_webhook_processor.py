"""Unit tests for webhook parsing and processing."""

import json
from unittest.mock import Mock, patch

import pytest

from innochannel.events import Event, EventManager
from innochannel.exceptions import SignatureError, ValidationError
from innochannel.webhook import (
    WebhookPayload,
    WebhookProcessor,
    compute_signature,
    create_response,
    parse_verified_payload,
)

RAW = json.dumps(
    {"event": "reservation.created", "object_type": "reservation", "data": {"id": "R1"}}
).encode()


@pytest.fixture
def events():
    return EventManager()


@pytest.fixture
def processor(webhook_secret, events):
    return WebhookProcessor(webhook_secret, events)


class TestParseVerifiedPayload:
    def test_valid_payload(self, webhook_secret):
        event = parse_verified_payload(RAW, compute_signature(RAW, webhook_secret), webhook_secret)

        assert isinstance(event, Event)
        assert event.name == "reservation.created"
        assert event.object_type == "reservation"
        assert event.data == {"id": "R1"}
        assert event.get("id") == "R1"
        assert event.source == "webhook"

    def test_object_type_defaults_to_event_prefix(self, webhook_secret):
        raw = b'{"event": "inventory.updated"}'

        event = parse_verified_payload(raw, compute_signature(raw, webhook_secret), webhook_secret)

        assert event.object_type == "inventory"
        assert event.data == {}
        assert event.action == "updated"

    def test_invalid_signature(self, webhook_secret):
        with pytest.raises(SignatureError, match="Invalid webhook signature"):
            parse_verified_payload(RAW, "0" * 64, webhook_secret)

    def test_signature_checked_before_json(self, webhook_secret):
        with pytest.raises(ValidationError, match="Invalid webhook signature"):
            parse_verified_payload(b"{not json", "bad", webhook_secret)

    def test_invalid_json(self, webhook_secret):
        raw = b"{not json"

        with pytest.raises(ValidationError, match="Invalid JSON payload"):
            parse_verified_payload(raw, compute_signature(raw, webhook_secret), webhook_secret)

    def test_shape_validation_alone_yields_no_event(self):
        payload = WebhookPayload.model_validate(json.loads(RAW))

        assert not hasattr(payload, "to_event")
        assert Event(payload.event, payload.data).source == "application"

    @pytest.mark.parametrize(
        "raw,field",
        [
            (b'{"data": {}}', "event"),
            (b'{"event": ""}', "event"),
            (b'{"event": "reservation.created", "data": [1, 2]}', "data"),
            (b"[1, 2]", "payload"),
        ],
    )
    def test_invalid_shape(self, webhook_secret, raw, field):
        with pytest.raises(ValidationError) as exc_info:
            parse_verified_payload(raw, compute_signature(raw, webhook_secret), webhook_secret)

        assert exc_info.value.has_error(field)
        assert exc_info.value.status_code == 400


class TestWebhookProcessor:
    def test_success_dispatches_event(self, processor, events, webhook_secret):
        listener = Mock(return_value=None)
        events.listen("reservation.created", listener)

        result = processor.handle(RAW, compute_signature(RAW, webhook_secret))

        assert result.status_code == 200
        assert result.success
        assert result.body["success"] is True
        assert result.body["message"] == "Webhook processed successfully"
        assert result.body["data"] == {"event": "reservation.created", "handled": True}
        assert "timestamp" in result.body
        assert listener.call_args.args[0].get("id") == "R1"

    def test_stopped_propagation_reported(self, processor, events, webhook_secret):
        events.listen("reservation.created", lambda event: False)

        result = processor.handle(RAW, compute_signature(RAW, webhook_secret))

        assert result.status_code == 200
        assert result.body["data"]["handled"] is False

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, processor, signature):
        result = processor.handle(RAW, signature)

        assert result.status_code == 401
        assert result.body["message"] == "Missing signature"
        assert result.body["success"] is False

    def test_invalid_signature(self, processor, events):
        listener = Mock()
        events.listen("*", listener)

        result = processor.handle(RAW, "deadbeef")

        assert result.status_code == 400
        assert result.body["message"] == "Invalid signature"
        listener.assert_not_called()

    def test_signature_computed_once(self, processor, webhook_secret):
        signature = compute_signature(RAW, webhook_secret)

        with patch(
            "innochannel.webhook.signature.compute_signature", wraps=compute_signature
        ) as spy:
            result = processor.handle(RAW, signature)

        assert result.status_code == 200
        assert spy.call_count == 1

    def test_invalid_payload(self, processor, webhook_secret):
        raw = b'{"object_type": "reservation"}'

        result = processor.handle(raw, compute_signature(raw, webhook_secret))

        assert result.status_code == 400
        assert result.body["message"] == "Invalid payload"
        assert "event" in result.body["data"]["errors"]

    def test_listener_failure_is_not_leaked(self, processor, events, webhook_secret):
        events.listen("reservation.created", Mock(side_effect=RuntimeError("db password=secret")))

        result = processor.handle(RAW, compute_signature(RAW, webhook_secret))

        assert result.status_code == 500
        assert result.body["message"] == "Webhook processing failed"
        assert "password" not in json.dumps(result.body)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            WebhookProcessor("")


def test_create_response_defaults():
    assert create_response(True)["message"] == "Webhook processed successfully"
    failure = create_response(False)
    assert failure["message"] == "Webhook processing failed"
    assert failure["data"] == {}
    assert failure["success"] is False
