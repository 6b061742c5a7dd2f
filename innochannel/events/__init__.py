"""Event dispatching for webhook events."""

from innochannel.events.dispatcher import (
    STOP_PROPAGATION,
    WILDCARD,
    EventDispatcher,
    EventDispatcherInterface,
    ListenerRegistration,
    NullDispatcher,
)
from innochannel.events.event import KNOWN_EVENTS, Event
from innochannel.events.manager import EventManager

__all__ = [
    "Event",
    "EventDispatcher",
    "EventDispatcherInterface",
    "EventManager",
    "KNOWN_EVENTS",
    "ListenerRegistration",
    "NullDispatcher",
    "STOP_PROPAGATION",
    "WILDCARD",
]
