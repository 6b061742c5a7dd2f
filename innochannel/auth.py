"""Authentication strategies for outgoing API requests."""

from abc import ABC, abstractmethod
from typing import Dict, Set

from innochannel.exceptions import AuthenticationError

REDACTED = "[REDACTED]"


class AuthStrategy(ABC):
    """Produces authentication headers for an outgoing request."""

    auth_type = "custom"

    @abstractmethod
    def authenticate(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Return a copy of ``headers`` with authentication applied."""

    def is_valid(self) -> bool:
        return True

    @property
    def sensitive_headers(self) -> Set[str]:
        """Header names whose values must never be logged."""
        return {"Authorization", "X-API-Key"}


class ApiKeyAuthentication(AuthStrategy):
    """API key authentication.

    With the default ``Authorization`` header the key is sent as a bearer
    token; any other header name carries the raw key.
    """

    auth_type = "api_key"

    def __init__(self, api_key: str, header_name: str = "Authorization"):
        if not api_key:
            raise AuthenticationError("API key cannot be empty")
        self.api_key = api_key
        self.header_name = header_name

    def authenticate(self, headers: Dict[str, str]) -> Dict[str, str]:
        authenticated = dict(headers)
        if self.header_name == "Authorization":
            authenticated[self.header_name] = f"Bearer {self.api_key}"
        else:
            authenticated[self.header_name] = self.api_key
        return authenticated

    def is_valid(self) -> bool:
        return len(self.api_key) >= 10

    @property
    def sensitive_headers(self) -> Set[str]:
        return super().sensitive_headers | {self.header_name}

    @property
    def masked_api_key(self) -> str:
        return mask_secret(self.api_key)


def mask_secret(value: str) -> str:
    """Mask a secret for display, keeping the first and last four characters."""
    if len(value) <= 8:
        return "*" * len(value)
    return value[:4] + "*" * (len(value) - 8) + value[-4:]


def sanitize_headers(headers: Dict[str, str], sensitive: Set[str]) -> Dict[str, str]:
    """Return a copy of ``headers`` safe for logging."""
    lowered = {name.lower() for name in sensitive}
    return {
        name: REDACTED if name.lower() in lowered else value for name, value in headers.items()
    }
