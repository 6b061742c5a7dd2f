"""Flask endpoint receiving Innochannel webhooks."""

from flask import Blueprint, Flask, jsonify, request

from innochannel.webhook.processor import WebhookProcessor, create_response


def create_webhook_blueprint(processor: WebhookProcessor, url_prefix: str = "") -> Blueprint:
    """Create a blueprint exposing the webhook endpoints.

    Args:
        processor: Processor that verifies and dispatches the webhooks
        url_prefix: Prefix for the blueprint routes

    Returns:
        Blueprint with ``POST /webhooks/innochannel`` and ``GET /webhooks/health``
    """
    blueprint = Blueprint("innochannel_webhooks", __name__, url_prefix=url_prefix or None)

    @blueprint.route("/webhooks/innochannel", methods=["POST"])
    def receive_webhook():
        # The signature covers the raw bytes, so the body must not be re-encoded
        raw = request.get_data()
        signature = request.headers.get(processor.signature_header)
        result = processor.handle(raw, signature)
        return jsonify(result.body), result.status_code

    @blueprint.route("/webhooks/health", methods=["GET"])
    def health():
        return jsonify(create_response(True, "ok", {"events_enabled": processor.events.enabled})), 200

    return blueprint


def create_app(processor: WebhookProcessor, url_prefix: str = "") -> Flask:
    """Create a Flask app serving the webhook endpoints."""
    app = Flask(__name__)
    app.register_blueprint(create_webhook_blueprint(processor, url_prefix))
    return app
