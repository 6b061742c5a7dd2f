"""Python SDK for the Innochannel hotel channel manager API."""

__version__ = "1.0.0"

from innochannel.auth import ApiKeyAuthentication, AuthStrategy  # noqa: E402
from innochannel.client import InnochannelClient  # noqa: E402
from innochannel.config import ClientConfig, DispatcherConfig  # noqa: E402
from innochannel.events import (  # noqa: E402
    STOP_PROPAGATION,
    Event,
    EventDispatcher,
    EventManager,
    NullDispatcher,
)
from innochannel.exceptions import (  # noqa: E402
    ApiError,
    AuthenticationError,
    InnochannelError,
    NotFoundError,
    RateLimitError,
    ServerError,
    SignatureError,
    ValidationError,
)
from innochannel.request_options import RequestOptions  # noqa: E402
from innochannel.webhook import WebhookProcessor, compute_signature, verify_signature  # noqa: E402

__all__ = [
    "ApiError",
    "ApiKeyAuthentication",
    "AuthStrategy",
    "AuthenticationError",
    "ClientConfig",
    "DispatcherConfig",
    "Event",
    "EventDispatcher",
    "EventManager",
    "InnochannelClient",
    "InnochannelError",
    "NotFoundError",
    "NullDispatcher",
    "RateLimitError",
    "RequestOptions",
    "STOP_PROPAGATION",
    "ServerError",
    "SignatureError",
    "ValidationError",
    "WebhookProcessor",
    "compute_signature",
    "verify_signature",
]
