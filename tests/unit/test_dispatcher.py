"""Unit tests for the event dispatcher."""

from unittest.mock import Mock

import pytest

from innochannel.config import DispatcherConfig
from innochannel.events import STOP_PROPAGATION, Event, EventDispatcher, NullDispatcher
from innochannel.exceptions import ListenerError, ListenerLimitError


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def event():
    return Event("reservation.created", {"id": "R1", "status": "new"})


def recorder(calls, label, result=None):
    def listener(event):
        calls.append(label)
        return result

    return listener


def test_priority_order(dispatcher, event):
    calls = []
    dispatcher.listen("reservation.created", recorder(calls, 1), priority=1)
    dispatcher.listen("reservation.created", recorder(calls, 5), priority=5)
    dispatcher.listen("reservation.created", recorder(calls, 3), priority=3)

    assert dispatcher.dispatch(event) is True
    assert calls == [5, 3, 1]


def test_equal_priority_keeps_registration_order(dispatcher, event):
    calls = []
    for label in ("a", "b", "c"):
        dispatcher.listen("reservation.created", recorder(calls, label))

    dispatcher.dispatch(event)

    assert calls == ["a", "b", "c"]


def test_wildcard_listeners_merge_by_priority(dispatcher, event):
    calls = []
    dispatcher.listen("*", recorder(calls, "global"), priority=2)
    dispatcher.listen("reservation.created", recorder(calls, "low"), priority=1)
    dispatcher.listen("reservation.created", recorder(calls, "high"), priority=3)
    dispatcher.listen("reservation.cancelled", recorder(calls, "other"), priority=10)

    dispatcher.dispatch(event)

    assert calls == ["high", "global", "low"]


def test_listener_receives_event(dispatcher, event):
    listener = Mock(return_value=None)
    dispatcher.listen("reservation.created", listener)

    dispatcher.dispatch(event)

    listener.assert_called_once_with(event)


@pytest.mark.parametrize("stop_value", [False, STOP_PROPAGATION])
def test_stop_propagation(dispatcher, event, stop_value):
    calls = []
    dispatcher.listen("reservation.created", recorder(calls, "first", stop_value), priority=2)
    dispatcher.listen("reservation.created", recorder(calls, "second"), priority=1)

    assert dispatcher.dispatch(event) is False
    assert calls == ["first"]


def test_none_and_truthy_results_continue(dispatcher, event):
    calls = []
    dispatcher.listen("reservation.created", recorder(calls, "none"))
    dispatcher.listen("reservation.created", recorder(calls, "zero", 0))
    dispatcher.listen("reservation.created", recorder(calls, "true", True))

    assert dispatcher.dispatch(event) is True
    assert calls == ["none", "zero", "true"]


def test_dispatch_without_listeners(dispatcher, event):
    assert dispatcher.dispatch(event) is True


def test_once_fires_once(dispatcher, event):
    listener = Mock(return_value=None)
    registration = dispatcher.once("reservation.created", listener)
    assert registration.once is True
    assert registration.callback is listener

    dispatcher.dispatch(event)
    dispatcher.dispatch(event)

    assert listener.call_count == 1
    assert not dispatcher.has_listeners("reservation.created")


def test_once_is_removed_before_reentrant_dispatch(dispatcher, event):
    calls = []

    def listener(received):
        calls.append(received.name)
        dispatcher.dispatch(received)

    dispatcher.once("reservation.created", listener)
    dispatcher.dispatch(event)

    assert calls == ["reservation.created"]


def test_listen_if(dispatcher):
    listener = Mock(return_value=None)
    after = Mock(return_value=None)
    dispatcher.listen_if(
        "reservation.created", lambda e: e.get("status") == "confirmed", listener, priority=1
    )
    dispatcher.listen("reservation.created", after)

    assert dispatcher.dispatch(Event("reservation.created", {"status": "new"})) is True
    listener.assert_not_called()
    after.assert_called_once()

    dispatcher.dispatch(Event("reservation.created", {"status": "confirmed"}))
    listener.assert_called_once()


def test_listen_where(dispatcher):
    listener = Mock(return_value=None)
    dispatcher.listen_where("reservation.created", {"property_id": 7, "status": "new"}, listener)

    dispatcher.dispatch(Event("reservation.created", {"property_id": 7}))
    dispatcher.dispatch(Event("reservation.created", {"property_id": 8, "status": "new"}))
    listener.assert_not_called()

    dispatcher.dispatch(Event("reservation.created", {"property_id": 7, "status": "new"}))
    listener.assert_called_once()


def test_forget_removes_plain_and_wrapped_registrations(dispatcher, event):
    listener = Mock(return_value=None)
    dispatcher.listen("reservation.created", listener)
    dispatcher.once("reservation.created", listener)
    dispatcher.listen_if("reservation.created", lambda e: True, listener)
    keep = Mock(return_value=None)
    dispatcher.listen("reservation.created", keep)

    assert dispatcher.forget("reservation.created", listener) == 3

    dispatcher.dispatch(event)
    listener.assert_not_called()
    keep.assert_called_once()


def test_forget_all(dispatcher):
    dispatcher.listen("reservation.created", Mock())
    dispatcher.listen("property.updated", Mock())

    dispatcher.forget_all("reservation.created")
    assert not dispatcher.has_listeners("reservation.created")
    assert dispatcher.has_listeners("property.updated")

    dispatcher.forget_all()
    assert not dispatcher.has_listeners("property.updated")


def test_listener_counts(dispatcher):
    dispatcher.listen("*", Mock())
    dispatcher.listen_to_many(["reservation.created", "reservation.updated"], Mock())

    assert dispatcher.count_listeners("reservation.created") == 2
    assert dispatcher.count_listeners("rates.updated") == 1
    assert [r.pattern for r in dispatcher.get_listeners("reservation.updated")] == [
        "reservation.updated",
        "*",
    ]


def test_invalid_registration(dispatcher):
    with pytest.raises(ValueError):
        dispatcher.listen("", Mock())
    with pytest.raises(TypeError):
        dispatcher.listen("reservation.created", "not callable")


class TestFailures:
    def test_stop_on_failure_propagates_first_error(self, dispatcher, event):
        later = Mock(return_value=None)
        dispatcher.listen("reservation.created", Mock(side_effect=RuntimeError("boom")), 2)
        dispatcher.listen("reservation.created", later, 1)

        with pytest.raises(RuntimeError, match="boom"):
            dispatcher.dispatch(event)

        later.assert_not_called()

    def test_continue_on_failure_collects_errors(self, event):
        dispatcher = EventDispatcher(DispatcherConfig(stop_on_failure=False))
        first = RuntimeError("first")
        second = KeyError("second")
        later = Mock(return_value=None)
        dispatcher.listen("reservation.created", Mock(side_effect=first), 3)
        dispatcher.listen("reservation.created", Mock(side_effect=second), 2)
        dispatcher.listen("reservation.created", later, 1)

        with pytest.raises(ListenerError) as exc_info:
            dispatcher.dispatch(event)

        later.assert_called_once()
        assert exc_info.value.failures == [first, second]
        assert exc_info.value.__cause__ is first
        assert exc_info.value.event_name == "reservation.created"

    def test_listener_limit(self):
        dispatcher = EventDispatcher(DispatcherConfig(max_listeners_per_event=2))
        dispatcher.listen("reservation.created", Mock())
        dispatcher.listen("reservation.created", Mock())

        with pytest.raises(ListenerLimitError):
            dispatcher.listen("reservation.created", Mock())

        dispatcher.listen("reservation.updated", Mock())

    def test_slow_listener_logged(self, event):
        dispatcher = EventDispatcher(DispatcherConfig(listener_timeout=0.5))
        dispatcher.listen("reservation.created", Mock(return_value=None))

        with pytest.MonkeyPatch.context() as mp:
            times = iter([100.0, 101.0])
            mp.setattr("innochannel.events.dispatcher.time.time", lambda: next(times))
            mock_logger = Mock()
            mp.setattr("innochannel.events.dispatcher.logger", mock_logger)

            assert dispatcher.dispatch(event) is True

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "listener_slow"


def test_null_dispatcher_does_nothing(event):
    dispatcher = NullDispatcher()
    listener = Mock()

    dispatcher.listen("reservation.created", listener)
    dispatcher.once("reservation.created", listener)

    assert dispatcher.dispatch(event) is True
    assert dispatcher.count_listeners("reservation.created") == 0
    assert dispatcher.forget("reservation.created", listener) == 0
    listener.assert_not_called()
