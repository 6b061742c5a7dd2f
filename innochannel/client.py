"""HTTP client for the Innochannel channel manager API.

Every resource service goes through :meth:`InnochannelClient.request`, which
authenticates the call, classifies the response into a typed error and
retries transient failures with a fixed delay.
"""

import json
import time
from typing import Any, Dict, Optional

import requests
import structlog

from innochannel.auth import ApiKeyAuthentication, AuthStrategy, sanitize_headers
from innochannel.config import ClientConfig
from innochannel.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from innochannel.metrics.prometheus import metrics
from innochannel.request_options import RequestOptions
from innochannel.services import (
    InventoryService,
    MonitoringService,
    OtaConnectionService,
    PropertyService,
    ReservationService,
    WebhookService,
)

logger = structlog.get_logger(__name__)

# Upstream faults expected to clear up on their own
TRANSIENT_STATUSES = frozenset({502, 503, 504})


class InnochannelClient:
    """Client for the Innochannel API.

    Example:
        >>> config = ClientConfig(api_key="key", api_secret="secret")
        >>> with InnochannelClient(config) as client:
        ...     client.reservations().get("R1")
    """

    def __init__(
        self,
        config: ClientConfig,
        auth: Optional[AuthStrategy] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            config: Validated client configuration
            auth: Authentication strategy, API key authentication by default
            session: Optional preconfigured requests session
        """
        self.config = config
        self.auth = auth or ApiKeyAuthentication(config.api_key)
        self.session = session or requests.Session()
        self._services: Dict[str, Any] = {}

        self.request_counter = metrics.register_counter(
            "innochannel_api_requests_total",
            "Total number of API request attempts",
            ["method", "outcome"],
        )
        self.retry_counter = metrics.register_counter(
            "innochannel_api_retries_total", "Total number of API request retries"
        )
        self.request_latency = metrics.register_histogram(
            "innochannel_api_request_duration_seconds", "Duration of API request attempts"
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any], **kwargs) -> "InnochannelClient":
        return cls(ClientConfig.from_dict(config_dict), **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    # Services

    def _service(self, name: str, factory):
        if name not in self._services:
            self._services[name] = factory(self)
        return self._services[name]

    def properties(self) -> PropertyService:
        """Properties, rooms and rate plans."""
        return self._service("properties", PropertyService)

    def inventory(self) -> InventoryService:
        """Availability, rates and restrictions."""
        return self._service("inventory", InventoryService)

    def reservations(self) -> ReservationService:
        return self._service("reservations", ReservationService)

    def webhooks(self) -> WebhookService:
        return self._service("webhooks", WebhookService)

    def ota_connections(self) -> OtaConnectionService:
        return self._service("ota_connections", OtaConnectionService)

    def monitoring(self) -> MonitoringService:
        return self._service("monitoring", MonitoringService)

    def test_connection(self, data: Optional[Dict[str, Any]] = None) -> Any:
        """Check that the API accepts the configured credentials."""
        return self.properties().test_pms_connection(data or {})

    # Request engine

    def request(
        self, method: str, path: str, options: Optional[RequestOptions] = None
    ) -> Optional[Any]:
        """Execute an API request.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            options: Query, body and header options

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            ApiError: One of the typed API errors
        """
        options = options or RequestOptions()
        method = method.upper()
        url = self._build_url(path)
        max_attempts = self.config.max_attempts
        last_status = 0
        last_error: Optional[Exception] = None

        for attempt in range(1, max_attempts + 1):
            headers = self._build_headers(options.headers)
            logger.debug(
                "api_request",
                method=method,
                path=path,
                attempt=attempt,
                max_attempts=max_attempts,
                headers=sanitize_headers(headers, self.auth.sensitive_headers),
            )

            start_time = time.time()
            try:
                response = self.session.request(
                    method,
                    url,
                    params=options.query or None,
                    json=options.json,
                    headers=headers,
                    timeout=self._timeout(options),
                )
            except requests.exceptions.RequestException as e:
                self.request_latency.observe(time.time() - start_time)
                self.request_counter.labels(method=method, outcome="transport_error").inc()
                last_status, last_error = 0, e
                if attempt < max_attempts:
                    self._wait_before_retry(method, path, attempt, error=str(e))
                    continue
                logger.error("api_request_failed", method=method, path=path, error=str(e))
                break

            self.request_latency.observe(time.time() - start_time)
            status_code = response.status_code
            body = response.text or ""
            logger.debug("api_response", status_code=status_code, body_length=len(body))

            if status_code < 400:
                self.request_counter.labels(method=method, outcome="success").inc()
                return self._decode_body(body, status_code)

            self.request_counter.labels(method=method, outcome="error").inc()

            if status_code in TRANSIENT_STATUSES:
                last_status, last_error = status_code, None
                if attempt < max_attempts:
                    self._wait_before_retry(method, path, attempt, status_code=status_code)
                    continue
                logger.error(
                    "api_request_failed", method=method, path=path, status_code=status_code
                )
                break

            # Everything else, 401 and 422 included, is final
            self._raise_for_status(status_code, body, response.headers)

        raise ApiError(
            f"Request failed after {max_attempts} attempt(s)",
            status_code=last_status,
            context={"method": method, "path": path, "attempts": max_attempts},
        ) from last_error

    def get(self, path: str, query: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        return self.request("GET", path, RequestOptions(query=dict(query or {})))

    def post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        return self.request("POST", path, RequestOptions(json=data or None))

    def put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        return self.request("PUT", path, RequestOptions(json=data or None))

    def patch(self, path: str, data: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        return self.request("PATCH", path, RequestOptions(json=data or None))

    def delete(self, path: str) -> Any:
        """Delete a resource, returning the response body or True when empty."""
        result = self.request("DELETE", path)
        return result if result else True

    def _build_url(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def _build_headers(self, extra_headers: Dict[str, str]) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self.config.user_agent,
        }
        headers.update(extra_headers)
        return self.auth.authenticate(headers)

    def _timeout(self, options: RequestOptions):
        return (self.config.connect_timeout, options.timeout or self.config.timeout)

    def _wait_before_retry(self, method: str, path: str, attempt: int, **details) -> None:
        self.retry_counter.inc()
        logger.warning(
            "api_request_retrying",
            method=method,
            path=path,
            attempt=attempt,
            retry_delay=self.config.retry_delay,
            **details,
        )
        time.sleep(self.config.retry_delay)

    @staticmethod
    def _decode_body(body: str, status_code: int) -> Optional[Any]:
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError as e:
            raise ApiError(f"Invalid JSON response: {e}", status_code=status_code) from e

    def _raise_for_status(self, status_code: int, body: str, headers) -> None:
        """Map an error response to its typed exception and raise it."""
        try:
            data = json.loads(body) if body else {}
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or "Unknown error"
        errors = data.get("errors") or {}
        if not isinstance(errors, dict):
            errors = {"general": errors}

        logger.error("api_error_response", status_code=status_code, message=message, errors=errors)

        if status_code in (400, 422):
            raise ValidationError(message, status_code=status_code, errors=errors)
        if status_code == 401:
            raise AuthenticationError(message)
        if status_code == 404:
            raise NotFoundError(message)
        if status_code == 429:
            raise RateLimitError(message, retry_after=_parse_retry_after(headers))
        if status_code == 500:
            raise ServerError(message)
        raise ApiError(message, status_code=status_code, errors=errors)


def _parse_retry_after(headers) -> Optional[int]:
    value = (headers or {}).get("Retry-After")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
