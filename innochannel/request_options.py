"""Per-call request options."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RequestOptions:
    """Options for a single API request.

    Attributes:
        query: Query string parameters
        json: JSON request body
        headers: Extra headers, overriding the client defaults
        timeout: Total timeout override in seconds
    """

    query: Dict[str, Any] = field(default_factory=dict)
    json: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None

    def add_header(self, name: str, value: str) -> "RequestOptions":
        self.headers[name] = value
        return self

    def add_query(self, name: str, value: Any) -> "RequestOptions":
        self.query[name] = value
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequestOptions":
        """Create RequestOptions from a dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
