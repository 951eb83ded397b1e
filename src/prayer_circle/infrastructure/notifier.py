"""Notification adapters backed by the event bus."""

import logging
from collections.abc import Sequence

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
from prayer_circle.services.ports import EventBusPort, NotifierPort

logger = logging.getLogger(__name__)


class EventBusNotifier(NotifierPort):
    """Her bildirimi bir domain event olarak yayınlar (en fazla bir kez)."""

    def __init__(self, event_bus: EventBusPort) -> None:
        self._event_bus = event_bus

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus.publish(event) == 0:
            logger.debug(f"Bildirimi alan abone yok: {type(event).__name__}")

    def notify_prayer_closed(self, prayer_id: str) -> None:
        self._publish(PrayerClosedEvent(prayer_id=prayer_id))

    def notify_user_added_to_prayer(self, user_id: str, prayer_id: str) -> None:
        self._publish(UserAddedToPrayerEvent(user_id=user_id, prayer_id=prayer_id))

    def notify_user_removed_from_prayer(self, user_id: str, prayer_id: str) -> None:
        self._publish(UserRemovedFromPrayerEvent(user_id=user_id, prayer_id=prayer_id))

    def notify_new_impression(self, prayer_id: str, user_id: str) -> None:
        self._publish(NewImpressionEvent(prayer_id=prayer_id, user_id=user_id))

    def notify_hidden_impressions_revealed(
        self,
        prayer_id: str,
        impressions: Sequence[Impression],
    ) -> None:
        self._publish(
            HiddenImpressionsRevealedEvent(prayer_id=prayer_id, impressions=tuple(impressions))
        )


def _describe(event: DomainEvent) -> str:
    if isinstance(event, PrayerClosedEvent):
        return f"Dua kapandı: {event.prayer_id}"
    if isinstance(event, UserAddedToPrayerEvent):
        return f"Kullanıcı {event.user_id} duaya eklendi: {event.prayer_id}"
    if isinstance(event, UserRemovedFromPrayerEvent):
        return f"Kullanıcı {event.user_id} duadan çıkarıldı: {event.prayer_id}"
    if isinstance(event, NewImpressionEvent):
        return f"Yeni izlenim ({event.user_id}): {event.prayer_id}"
    if isinstance(event, HiddenImpressionsRevealedEvent):
        return f"{len(event.impressions)} gizli izlenim açığa çıktı: {event.prayer_id}"
    return type(event).__name__


def log_notification(event: DomainEvent) -> None:
    """Bildirimi logla."""
    logger.info(f"Bildirim: {_describe(event)}")


def register_notification_logging(event_bus: InMemoryEventBus) -> None:
    """Tüm bildirim event'lerine log aboneliği ekle."""
    event_bus.subscribe_many(NOTIFICATION_EVENTS, log_notification)
