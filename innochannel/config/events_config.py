"""Configuration settings for event dispatching."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DispatcherConfig:
    """Configuration for the event dispatcher.

    Attributes:
        stop_on_failure: Abort dispatch on the first failing listener
        max_listeners_per_event: Maximum registrations per event pattern
        listener_timeout: Seconds after which a listener is reported as slow
        log_payloads: Include event data in dispatch logs
    """

    stop_on_failure: bool = True
    max_listeners_per_event: Optional[int] = None
    listener_timeout: Optional[float] = None
    log_payloads: bool = False

    def __post_init__(self):
        if self.max_listeners_per_event is not None and self.max_listeners_per_event < 1:
            raise ValueError("max_listeners_per_event must be at least 1")
        if self.listener_timeout is not None and self.listener_timeout <= 0:
            raise ValueError("listener_timeout must be positive")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "DispatcherConfig":
        """Create a DispatcherConfig instance from a dictionary.

        Args:
            config_dict: Dictionary containing configuration values

        Returns:
            DispatcherConfig instance with values from dictionary
        """
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls) -> "DispatcherConfig":
        """Create config from ``INNOCHANNEL_EVENTS_*`` environment variables."""
        max_listeners = os.getenv("INNOCHANNEL_EVENTS_MAX_LISTENERS")
        listener_timeout = os.getenv("INNOCHANNEL_EVENTS_LISTENER_TIMEOUT")
        return cls(
            stop_on_failure=_env_flag("INNOCHANNEL_EVENTS_STOP_ON_FAILURE", "true"),
            max_listeners_per_event=int(max_listeners) if max_listeners else None,
            listener_timeout=float(listener_timeout) if listener_timeout else None,
            log_payloads=_env_flag("INNOCHANNEL_EVENTS_LOG_PAYLOAD", "false"),
        )
