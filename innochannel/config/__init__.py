"""Configuration management for Innochannel SDK components."""

from .client_config import ClientConfig, is_valid_url
from .events_config import DispatcherConfig

__all__ = ["ClientConfig", "DispatcherConfig", "is_valid_url"]
