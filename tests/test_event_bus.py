"""Tests for the EventBus domain event dispatch system."""

from angler.events import EventBus
from angler.events.domain_events import (
    CatchResultEvent,
    PhaseChangedEvent,
    ToastEvent,
)


class TestEventBus:
    """Test suite for EventBus functionality."""

    def test_emit_reaches_subscriber(self) -> None:
        """Verify events are delivered to subscribed handlers."""
        bus = EventBus()
        received_events: list = []

        def handler(event: ToastEvent) -> None:
            received_events.append(event)

        bus.subscribe(ToastEvent, handler)

        event = ToastEvent(message="Something's biting!", frame=100)
        bus.emit(event)

        assert len(received_events) == 1
        assert received_events[0] is event
        assert received_events[0].message == "Something's biting!"

    def test_no_subscribers_no_crash(self) -> None:
        """Verify emitting with no subscribers is a no-op."""
        bus = EventBus()

        bus.emit(ToastEvent(message="Lights ON", frame=1))

        assert bus.subscriber_count(ToastEvent) == 0

    def test_multiple_handlers_same_type(self) -> None:
        """Verify multiple handlers for the same event type all receive it, in order."""
        bus = EventBus()
        results: list = []

        def handler1(event: CatchResultEvent) -> None:
            results.append(("h1", event.species_id))

        def handler2(event: CatchResultEvent) -> None:
            results.append(("h2", event.species_id))

        bus.subscribe(CatchResultEvent, handler1)
        bus.subscribe(CatchResultEvent, handler2)

        bus.emit(CatchResultEvent(species_id="blue", species_name="Neon Tetra", value=90, frame=200))

        assert results == [("h1", "blue"), ("h2", "blue")]

    def test_handler_receives_correct_type_only(self) -> None:
        """Verify handlers only receive events of their subscribed type."""
        bus = EventBus()
        toasts: list = []
        phases: list = []

        bus.subscribe(ToastEvent, toasts.append)
        bus.subscribe(PhaseChangedEvent, phases.append)

        bus.emit(ToastEvent(message="Casted 120ft!", frame=10))
        bus.emit(PhaseChangedEvent(from_phase="idle", to_phase="casting", reason="cast", frame=10))

        assert len(toasts) == 1
        assert toasts[0].message == "Casted 120ft!"
        assert len(phases) == 1
        assert phases[0].to_phase == "casting"

    def test_unsubscribe_removes_handler(self) -> None:
        """Verify unsubscribe removes the handler from receiving events."""
        bus = EventBus()
        received: list = []

        def handler(event: ToastEvent) -> None:
            received.append(event)

        bus.subscribe(ToastEvent, handler)
        bus.emit(ToastEvent(message="first", frame=1))
        assert len(received) == 1

        assert bus.unsubscribe(ToastEvent, handler) is True
        assert bus.unsubscribe(ToastEvent, handler) is False

        bus.emit(ToastEvent(message="second", frame=2))
        assert len(received) == 1  # Still only 1

    def test_handler_may_unsubscribe_during_emit(self) -> None:
        """Verify a handler removing itself does not skip the others."""
        bus = EventBus()
        received: list = []

        def once(event: ToastEvent) -> None:
            received.append("once")
            bus.unsubscribe(ToastEvent, once)

        bus.subscribe(ToastEvent, once)
        bus.subscribe(ToastEvent, lambda e: received.append("always"))

        bus.emit(ToastEvent(message="a", frame=1))
        bus.emit(ToastEvent(message="b", frame=2))

        assert received == ["once", "always", "always"]

    def test_clear_subscribers(self) -> None:
        """Verify clear_subscribers removes all handlers."""
        bus = EventBus()

        bus.subscribe(ToastEvent, lambda e: None)
        bus.subscribe(CatchResultEvent, lambda e: None)

        assert bus.has_subscribers(ToastEvent)
        assert bus.has_subscribers(CatchResultEvent)

        bus.clear_subscribers()

        assert not bus.has_subscribers(ToastEvent)
        assert not bus.has_subscribers(CatchResultEvent)
