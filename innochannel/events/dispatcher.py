"""Priority-ordered event dispatching.

Listeners are registered per event name, or for every event with the ``"*"``
pattern. On dispatch, listeners run synchronously in descending priority
order; listeners of equal priority run in registration order.
"""

import itertools
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

from innochannel.config import DispatcherConfig
from innochannel.events.event import Event
from innochannel.exceptions import ListenerError, ListenerLimitError
from innochannel.metrics.prometheus import metrics

logger = structlog.get_logger(__name__)

WILDCARD = "*"


class _StopPropagation:
    def __repr__(self) -> str:
        return "STOP_PROPAGATION"


# Returned by a listener to stop later listeners from running
STOP_PROPAGATION = _StopPropagation()

Listener = Callable[[Event], Any]


@dataclass(eq=False)
class ListenerRegistration:
    """A listener registered for an event pattern.

    ``callback`` is what the caller registered and what ``forget`` matches on;
    ``handler`` is what gets invoked, a wrapper for ``once``, ``listen_if`` and
    ``listen_where`` registrations.
    """

    pattern: str
    callback: Listener
    handler: Optional[Listener] = None
    priority: int = 0
    once: bool = False
    sequence: int = 0
    name: str = field(default="")

    def __post_init__(self):
        if self.handler is None:
            self.handler = self.callback
        if not self.name:
            self.name = getattr(self.callback, "__qualname__", repr(self.callback))

    def matches(self, callback: Listener) -> bool:
        return self.callback is callback or self.handler is callback


class EventDispatcherInterface(ABC):
    """Operations shared by real and null dispatchers."""

    @abstractmethod
    def listen(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        pass

    @abstractmethod
    def dispatch(self, event: Event) -> bool:
        pass

    @abstractmethod
    def forget(self, pattern: str, callback: Listener) -> int:
        pass

    @abstractmethod
    def forget_all(self, pattern: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def get_listeners(self, event_name: str) -> List[ListenerRegistration]:
        pass

    def listen_to_many(
        self, names: Iterable[str], callback: Listener, priority: int = 0
    ) -> List[ListenerRegistration]:
        return [self.listen(name, callback, priority) for name in names]

    def once(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        """Register a listener that is removed before its first invocation."""
        registration: Dict[str, ListenerRegistration] = {}

        def wrapper(event: Event) -> Any:
            self._remove(registration["self"])
            return callback(event)

        registration["self"] = self._register(
            pattern, callback, priority, handler=wrapper, once=True
        )
        return registration["self"]

    def listen_if(
        self,
        pattern: str,
        predicate: Callable[[Event], bool],
        callback: Listener,
        priority: int = 0,
    ) -> ListenerRegistration:
        """Register a listener that only runs when ``predicate(event)`` is true."""

        def wrapper(event: Event) -> Any:
            if predicate(event):
                return callback(event)
            return None

        return self._register(pattern, callback, priority, handler=wrapper)

    def listen_where(
        self,
        pattern: str,
        criteria: Dict[str, Any],
        callback: Listener,
        priority: int = 0,
    ) -> ListenerRegistration:
        """Register a listener that runs when ``event.data`` matches every criterion."""

        def matches(event: Event) -> bool:
            return all(
                key in event.data and event.data[key] == value for key, value in criteria.items()
            )

        return self.listen_if(pattern, matches, callback, priority)

    def has_listeners(self, event_name: str) -> bool:
        return bool(self.get_listeners(event_name))

    def count_listeners(self, event_name: str) -> int:
        return len(self.get_listeners(event_name))

    @abstractmethod
    def _register(
        self,
        pattern: str,
        callback: Listener,
        priority: int,
        handler: Optional[Listener] = None,
        once: bool = False,
    ) -> ListenerRegistration:
        pass

    @abstractmethod
    def _remove(self, registration: ListenerRegistration) -> None:
        pass


class EventDispatcher(EventDispatcherInterface):
    """In-process event dispatcher."""

    def __init__(self, config: Optional[DispatcherConfig] = None):
        self.config = config or DispatcherConfig()
        self._listeners: Dict[str, List[ListenerRegistration]] = {}
        self._sequence = itertools.count()

        self.dispatch_counter = metrics.register_counter(
            "innochannel_events_dispatched_total", "Total number of events dispatched", ["event"]
        )
        self.listener_gauge = metrics.register_gauge(
            "innochannel_event_listeners", "Number of registered event listeners"
        )

    def listen(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        return self._register(pattern, callback, priority)

    def _register(
        self,
        pattern: str,
        callback: Listener,
        priority: int,
        handler: Optional[Listener] = None,
        once: bool = False,
    ) -> ListenerRegistration:
        if not pattern:
            raise ValueError("Event pattern cannot be empty")
        if not callable(callback):
            raise TypeError("Listener must be callable")

        registrations = self._listeners.setdefault(pattern, [])
        limit = self.config.max_listeners_per_event
        if limit is not None and len(registrations) >= limit:
            raise ListenerLimitError(
                f"Event '{pattern}' already has the maximum of {limit} listener(s)"
            )

        registration = ListenerRegistration(
            pattern=pattern,
            callback=callback,
            handler=handler,
            priority=priority,
            once=once,
            sequence=next(self._sequence),
        )
        registrations.append(registration)
        self.listener_gauge.inc()
        logger.debug(
            "listener_registered", pattern=pattern, listener=registration.name, priority=priority
        )
        return registration

    def _remove(self, registration: ListenerRegistration) -> None:
        registrations = self._listeners.get(registration.pattern, [])
        if registration in registrations:
            registrations.remove(registration)
            self.listener_gauge.dec()
        if not registrations:
            self._listeners.pop(registration.pattern, None)

    def get_listeners(self, event_name: str) -> List[ListenerRegistration]:
        """Listeners that would run for ``event_name``, in invocation order."""
        registrations = list(self._listeners.get(event_name, []))
        if event_name != WILDCARD:
            registrations.extend(self._listeners.get(WILDCARD, []))
        return sorted(registrations, key=lambda r: (-r.priority, r.sequence))

    def forget(self, pattern: str, callback: Listener) -> int:
        """Remove every registration of ``callback`` for ``pattern``.

        Returns:
            Number of registrations removed
        """
        removed = [r for r in self._listeners.get(pattern, []) if r.matches(callback)]
        for registration in removed:
            self._remove(registration)
        return len(removed)

    def forget_all(self, pattern: Optional[str] = None) -> None:
        """Remove all listeners of ``pattern``, or every listener when omitted."""
        patterns = [pattern] if pattern is not None else list(self._listeners)
        for name in patterns:
            for registration in list(self._listeners.get(name, [])):
                self._remove(registration)

    def dispatch(self, event: Event) -> bool:
        """Dispatch ``event`` to its listeners.

        Returns:
            False when a listener stopped propagation, True otherwise

        Raises:
            ListenerError: When listeners failed and ``stop_on_failure`` is off
        """
        registrations = self.get_listeners(event.name)
        self.dispatch_counter.labels(event=event.name).inc()

        log_context = {"event_name": event.name, "listeners": len(registrations)}
        if self.config.log_payloads:
            log_context["data"] = event.data
        logger.debug("event_dispatching", **log_context)

        failures: List[Exception] = []
        for registration in registrations:
            try:
                result = self._invoke(registration, event)
            except Exception as e:
                if self.config.stop_on_failure:
                    logger.error(
                        "listener_failed",
                        event_name=event.name,
                        listener=registration.name,
                        error=str(e),
                    )
                    raise
                logger.warning(
                    "listener_failed",
                    event_name=event.name,
                    listener=registration.name,
                    error=str(e),
                )
                failures.append(e)
                continue

            if result is False or result is STOP_PROPAGATION:
                logger.debug(
                    "event_propagation_stopped", event_name=event.name, listener=registration.name
                )
                if failures:
                    raise ListenerError(event.name, failures) from failures[0]
                return False

        if failures:
            raise ListenerError(event.name, failures) from failures[0]
        return True

    def _invoke(self, registration: ListenerRegistration, event: Event) -> Any:
        start_time = time.time()
        try:
            return registration.handler(event)
        finally:
            elapsed = time.time() - start_time
            timeout = self.config.listener_timeout
            if timeout is not None and elapsed > timeout:
                logger.warning(
                    "listener_slow",
                    event_name=event.name,
                    listener=registration.name,
                    elapsed=round(elapsed, 3),
                    listener_timeout=timeout,
                )


class NullDispatcher(EventDispatcherInterface):
    """Dispatcher that accepts registrations and ignores everything."""

    def listen(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        return self._register(pattern, callback, priority)

    def _register(
        self,
        pattern: str,
        callback: Listener,
        priority: int,
        handler: Optional[Listener] = None,
        once: bool = False,
    ) -> ListenerRegistration:
        return ListenerRegistration(pattern, callback, handler, priority, once)

    def _remove(self, registration: ListenerRegistration) -> None:
        pass

    def dispatch(self, event: Event) -> bool:
        return True

    def forget(self, pattern: str, callback: Listener) -> int:
        return 0

    def forget_all(self, pattern: Optional[str] = None) -> None:
        pass

    def get_listeners(self, event_name: str) -> List[ListenerRegistration]:
        return []
