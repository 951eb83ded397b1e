"""Domain events for event-driven architecture."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from prayer_circle.domain.models import Impression


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, kw_only=True)
class PrayerClosedEvent(DomainEvent):
    """Dua kapandığında."""

    prayer_id: str


@dataclass(frozen=True, kw_only=True)
class UserAddedToPrayerEvent(DomainEvent):
    """Kullanıcı duaya katılımcı olarak eklendiğinde."""

    user_id: str
    prayer_id: str


@dataclass(frozen=True, kw_only=True)
class UserRemovedFromPrayerEvent(DomainEvent):
    """Kullanıcı duadan çıkarıldığında."""

    user_id: str
    prayer_id: str


@dataclass(frozen=True, kw_only=True)
class NewImpressionEvent(DomainEvent):
    """Açık (visible) duaya yeni izlenim eklendiğinde."""

    prayer_id: str
    user_id: str


@dataclass(frozen=True, kw_only=True)
class HiddenImpressionsRevealedEvent(DomainEvent):
    """Gizli dua kapanınca tüm izlenimler açığa çıkar."""

    prayer_id: str
    impressions: tuple[Impression, ...] = ()


NOTIFICATION_EVENTS: tuple[type[DomainEvent], ...] = (
    PrayerClosedEvent,
    UserAddedToPrayerEvent,
    UserRemovedFromPrayerEvent,
    NewImpressionEvent,
    HiddenImpressionsRevealedEvent,
)
