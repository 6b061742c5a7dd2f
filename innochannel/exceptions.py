"""
Custom exceptions for the Innochannel SDK.
"""
from typing import Any, Dict, List, Optional


class InnochannelError(Exception):
    """Base exception for Innochannel SDK errors."""

    pass


class ApiError(InnochannelError):
    """Raised when an API call fails.

    Used directly for failures outside the typed set: unexpected status codes,
    transport failures, undecodable responses and exhausted retries.

    Attributes:
        message: Human readable error message
        status_code: HTTP status code, 0 when no response was received
        errors: Field level error map
        context: Additional diagnostic data
    """

    default_message = "Innochannel API error"
    default_status = 0

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.status_code = self.default_status if status_code is None else status_code
        self.errors = errors or {}
        self.context = context or {}
        super().__init__(self.message)

    def formatted_errors(self) -> str:
        """Flatten the field map into ``field: message`` pairs joined by ``; ``."""
        formatted = []
        for field, field_errors in self.errors.items():
            if isinstance(field_errors, list):
                formatted.extend(f"{field}: {error}" for error in field_errors)
            else:
                formatted.append(f"{field}: {field_errors}")
        return "; ".join(formatted)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, status_code={self.status_code})"


class ValidationError(ApiError):
    """Raised when request or payload data fails validation (400/422)."""

    default_message = "Validation failed"
    default_status = 422

    def has_error(self, field: str) -> bool:
        return field in self.errors

    def field_errors(self, field: str) -> List[str]:
        errors = self.errors.get(field, [])
        if isinstance(errors, list):
            return errors
        return [errors]


class SignatureError(ValidationError):
    """Raised when a webhook body does not match its signature."""

    default_message = "Invalid webhook signature"
    default_status = 400


class AuthenticationError(ApiError):
    """Raised when the API rejects the credentials (401)."""

    default_message = "Authentication failed"
    default_status = 401


class NotFoundError(ApiError):
    """Raised when a resource does not exist (404)."""

    default_message = "Resource not found"
    default_status = 404


class RateLimitError(ApiError):
    """Raised when the rate limit is exceeded (429)."""

    default_message = "Rate limit exceeded"
    default_status = 429

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(ApiError):
    """Raised when the API reports an internal server error (500)."""

    default_message = "Innochannel server error"
    default_status = 500


class EventError(InnochannelError):
    """Base exception for event dispatching errors."""

    pass


class ListenerError(EventError):
    """Raised after dispatch when one or more listeners failed.

    Only used when the dispatcher is configured to keep going after a failing
    listener.
    """

    def __init__(self, event_name: str, failures: List[Exception]):
        self.event_name = event_name
        self.failures = failures
        super().__init__(f"{len(failures)} listener(s) failed for event '{event_name}'")


class ListenerLimitError(EventError, ValueError):
    """Raised when registering more listeners than allowed for an event."""

    pass
