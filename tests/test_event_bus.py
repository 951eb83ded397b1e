"""Tests for the event bus and event-based notifier."""

import logging

import pytest

from prayer_circle.domain.events import (
    NOTIFICATION_EVENTS,
    DomainEvent,
    HiddenImpressionsRevealedEvent,
    NewImpressionEvent,
    PrayerClosedEvent,
    UserAddedToPrayerEvent,
    UserRemovedFromPrayerEvent,
)
from prayer_circle.domain.models import Impression
from prayer_circle.infrastructure.event_bus import InMemoryEventBus
from prayer_circle.infrastructure.notifier import (
    EventBusNotifier,
    register_notification_logging,
)


class TestInMemoryEventBus:
    """Event bus tests."""

    def test_publish_to_subscribers(self) -> None:
        """Test handlers receive events of their type only."""
        bus = InMemoryEventBus()
        received: list[DomainEvent] = []
        bus.subscribe(PrayerClosedEvent, received.append)

        bus.publish(PrayerClosedEvent(prayer_id="p1"))
        bus.publish(NewImpressionEvent(prayer_id="p1", user_id="bob"))

        assert len(received) == 1
        assert received[0].prayer_id == "p1"  # type: ignore[attr-defined]

    def test_failing_handler_does_not_stop_others(self) -> None:
        """Test one broken handler does not block the rest."""
        bus = InMemoryEventBus()
        received: list[DomainEvent] = []

        def broken(event: DomainEvent) -> None:
            raise RuntimeError("boom")

        bus.subscribe(PrayerClosedEvent, broken)
        bus.subscribe(PrayerClosedEvent, received.append)

        assert bus.publish(PrayerClosedEvent(prayer_id="p1")) == 1
        assert len(received) == 1

    def test_publish_without_subscribers(self) -> None:
        """Test publishing with no subscribers delivers nothing."""
        bus = InMemoryEventBus()
        assert bus.publish(PrayerClosedEvent(prayer_id="p1")) == 0

    def test_unsubscribe(self) -> None:
        """Test unsubscribed handler is not called."""
        bus = InMemoryEventBus()
        received: list[DomainEvent] = []
        bus.subscribe(PrayerClosedEvent, received.append)

        assert bus.unsubscribe(PrayerClosedEvent, received.append) is True
        assert bus.unsubscribe(PrayerClosedEvent, received.append) is False

        bus.publish(PrayerClosedEvent(prayer_id="p1"))
        assert received == []

    def test_subscribe_many(self) -> None:
        """Test one handler bound to several event types."""
        bus = InMemoryEventBus()
        bus.subscribe_many((PrayerClosedEvent, NewImpressionEvent), print)

        assert bus.subscriber_count(PrayerClosedEvent) == 1
        assert bus.subscriber_count(NewImpressionEvent) == 1
        assert bus.subscriber_count(UserAddedToPrayerEvent) == 0

    def test_events_are_unique(self) -> None:
        """Test each event carries its own id and UTC time."""
        first = PrayerClosedEvent(prayer_id="p1")
        second = PrayerClosedEvent(prayer_id="p1")
        assert first.event_id != second.event_id
        assert first.occurred_at.utcoffset() is not None


class TestEventBusNotifier:
    """Notifier adapter tests."""

    @pytest.fixture
    def received(self) -> list[DomainEvent]:
        """Collected events."""
        return []

    @pytest.fixture
    def notifier(self, received: list[DomainEvent]) -> EventBusNotifier:
        """Notifier publishing on a bus that records every notification event."""
        bus = InMemoryEventBus()
        bus.subscribe_many(NOTIFICATION_EVENTS, received.append)
        return EventBusNotifier(bus)

    def test_each_call_publishes_one_event(
        self, notifier: EventBusNotifier, received: list[DomainEvent]
    ) -> None:
        """Test notifications map to events one to one."""
        impression = Impression(id="i1", content="Amin", user_id="bob")

        notifier.notify_prayer_closed("p1")
        notifier.notify_user_added_to_prayer("bob", "p1")
        notifier.notify_user_removed_from_prayer("bob", "p1")
        notifier.notify_new_impression("p1", "bob")
        notifier.notify_hidden_impressions_revealed("p1", [impression])

        assert [type(e) for e in received] == [
            PrayerClosedEvent,
            UserAddedToPrayerEvent,
            UserRemovedFromPrayerEvent,
            NewImpressionEvent,
            HiddenImpressionsRevealedEvent,
        ]
        assert received[1] == UserAddedToPrayerEvent(
            user_id="bob",
            prayer_id="p1",
            event_id=received[1].event_id,
            occurred_at=received[1].occurred_at,
        )
        assert received[-1].impressions == (impression,)  # type: ignore[attr-defined]

    def test_notification_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test registered log handler writes one line per notification."""
        bus = InMemoryEventBus()
        register_notification_logging(bus)
        notifier = EventBusNotifier(bus)

        with caplog.at_level(logging.INFO, logger="prayer_circle.infrastructure.notifier"):
            notifier.notify_user_added_to_prayer("bob", "p1")

        assert "Kullanıcı bob duaya eklendi: p1" in caplog.text
