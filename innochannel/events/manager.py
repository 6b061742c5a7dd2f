"""Holder for the active event dispatcher."""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import structlog

from innochannel.events.dispatcher import (
    EventDispatcher,
    EventDispatcherInterface,
    Listener,
    ListenerRegistration,
    NullDispatcher,
)
from innochannel.events.event import Event

logger = structlog.get_logger(__name__)


class EventManager:
    """Routes listener registration and dispatch to the active dispatcher.

    The active dispatcher can be swapped, or temporarily replaced with a
    :class:`NullDispatcher` to run work without emitting events.
    """

    def __init__(self, dispatcher: Optional[EventDispatcherInterface] = None):
        self._dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self._disabled_from: Optional[EventDispatcherInterface] = None

    @property
    def dispatcher(self) -> EventDispatcherInterface:
        return self._dispatcher

    @property
    def enabled(self) -> bool:
        return not isinstance(self._dispatcher, NullDispatcher)

    def swap(self, dispatcher: EventDispatcherInterface) -> EventDispatcherInterface:
        """Install ``dispatcher`` and return the one it replaces."""
        previous = self._dispatcher
        self._dispatcher = dispatcher
        return previous

    def disable(self) -> None:
        if self.enabled:
            self._disabled_from = self.swap(NullDispatcher())
            logger.debug("events_disabled")

    def enable(self) -> None:
        if not self.enabled and self._disabled_from is not None:
            self.swap(self._disabled_from)
            self._disabled_from = None
            logger.debug("events_enabled")

    def without_events(self, work: Callable[..., Any], *args, **kwargs) -> Any:
        """Run ``work`` with events suppressed and return its result."""
        with self.suppressed():
            return work(*args, **kwargs)

    @contextmanager
    def suppressed(self) -> Iterator[None]:
        """Suppress events inside the block; the previous dispatcher is always restored."""
        previous = self.swap(NullDispatcher())
        try:
            yield
        finally:
            self.swap(previous)

    # Delegation

    def listen(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        return self._dispatcher.listen(pattern, callback, priority)

    def listen_to_many(
        self, names: Iterable[str], callback: Listener, priority: int = 0
    ) -> List[ListenerRegistration]:
        return self._dispatcher.listen_to_many(names, callback, priority)

    def once(self, pattern: str, callback: Listener, priority: int = 0) -> ListenerRegistration:
        return self._dispatcher.once(pattern, callback, priority)

    def listen_if(
        self, pattern: str, predicate: Callable[[Event], bool], callback: Listener, priority: int = 0
    ) -> ListenerRegistration:
        return self._dispatcher.listen_if(pattern, predicate, callback, priority)

    def listen_where(
        self, pattern: str, criteria: Dict[str, Any], callback: Listener, priority: int = 0
    ) -> ListenerRegistration:
        return self._dispatcher.listen_where(pattern, criteria, callback, priority)

    def dispatch(self, event: Event) -> bool:
        return self._dispatcher.dispatch(event)

    def forget(self, pattern: str, callback: Listener) -> int:
        return self._dispatcher.forget(pattern, callback)

    def forget_all(self, pattern: Optional[str] = None) -> None:
        self._dispatcher.forget_all(pattern)

    def has_listeners(self, event_name: str) -> bool:
        return self._dispatcher.has_listeners(event_name)

    def count_listeners(self, event_name: str) -> int:
        return self._dispatcher.count_listeners(event_name)

    def get_listeners(self, event_name: str) -> List[ListenerRegistration]:
        return self._dispatcher.get_listeners(event_name)
