"""Configuration settings for the Innochannel API client."""

import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

from innochannel import __version__
from innochannel.exceptions import ValidationError

DEFAULT_BASE_URL = "https://api.innotel.com.br"
DEFAULT_USER_AGENT = f"Innochannel-Python-SDK/{__version__}"


def is_valid_url(url: Any) -> bool:
    """Check that ``url`` is a well-formed http(s) URL."""
    if not isinstance(url, str) or not url or any(c.isspace() for c in url):
        return False
    try:
        result = urlsplit(url)
        # Raises ValueError for a malformed port
        result.port
    except ValueError:
        return False
    return result.scheme in ("http", "https") and bool(result.hostname)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and transport settings for the API client.

    Attributes:
        api_key: API key sent with every request
        api_secret: API secret issued with the key
        base_url: Root URL of the Innochannel API
        timeout: Total request timeout in seconds
        connect_timeout: Connection establishment timeout in seconds
        retry_attempts: Extra attempts for transient failures
        retry_delay: Fixed delay between attempts in seconds
        user_agent: User-Agent header value
    """

    api_key: str
    api_secret: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    connect_timeout: float = 10.0
    retry_attempts: int = 0
    retry_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        errors = {}

        if not self.api_key:
            errors["api_key"] = ["API key is required"]
        if not self.api_secret:
            errors["api_secret"] = ["API secret is required"]
        if not is_valid_url(self.base_url):
            errors["base_url"] = ["Invalid base URL provided"]
        if not _is_number(self.timeout) or self.timeout <= 0:
            errors["timeout"] = ["Timeout must be a positive number"]
        if not _is_number(self.connect_timeout) or self.connect_timeout <= 0:
            errors["connect_timeout"] = ["Connect timeout must be a positive number"]
        if not _is_int(self.retry_attempts) or self.retry_attempts < 0:
            errors["retry_attempts"] = ["Retry attempts must be an integer of zero or more"]
        if not _is_number(self.retry_delay) or self.retry_delay < 0:
            errors["retry_delay"] = ["Retry delay must be a number of zero or more"]

        if errors:
            raise ValidationError("Invalid client configuration", errors=errors)

        # Keep URL joining predictable
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def max_attempts(self) -> int:
        return self.retry_attempts + 1

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ClientConfig":
        """Create a ClientConfig instance from a dictionary.

        Unknown keys are ignored.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            ClientConfig instance with values from dictionary
        """
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create config from environment variables.

        Environment Variables:
            INNOCHANNEL_API_KEY: Required API key
            INNOCHANNEL_API_SECRET: Required API secret
            INNOCHANNEL_BASE_URL: Optional base URL
            INNOCHANNEL_TIMEOUT: Optional request timeout
            INNOCHANNEL_CONNECT_TIMEOUT: Optional connect timeout
            INNOCHANNEL_RETRY_ATTEMPTS: Optional retry attempts
            INNOCHANNEL_RETRY_DELAY: Optional retry delay in seconds

        Returns:
            ClientConfig instance

        Raises:
            ValidationError: If required values are missing or invalid
        """
        errors: Dict[str, Any] = {}

        def read(field: str, name: str, default: str, cast: Callable[[str], Any]) -> Optional[Any]:
            raw = os.getenv(name, default)
            try:
                return cast(raw)
            except ValueError:
                errors[field] = [f"{name} has an invalid value: {raw!r}"]
                return None

        numbers = {
            "timeout": read("timeout", "INNOCHANNEL_TIMEOUT", "30", float),
            "connect_timeout": read("connect_timeout", "INNOCHANNEL_CONNECT_TIMEOUT", "10", float),
            "retry_attempts": read("retry_attempts", "INNOCHANNEL_RETRY_ATTEMPTS", "0", int),
            "retry_delay": read("retry_delay", "INNOCHANNEL_RETRY_DELAY", "1.0", float),
        }
        if errors:
            raise ValidationError("Invalid client configuration", errors=errors)

        return cls(
            api_key=os.getenv("INNOCHANNEL_API_KEY", ""),
            api_secret=os.getenv("INNOCHANNEL_API_SECRET", ""),
            base_url=os.getenv("INNOCHANNEL_BASE_URL", DEFAULT_BASE_URL),
            **numbers,
        )
