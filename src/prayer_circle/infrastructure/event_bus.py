"""In-memory event bus implementation."""

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable

from prayer_circle.domain.events import DomainEvent
from prayer_circle.services.ports import EventBusPort

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class InMemoryEventBus(EventBusPort):
    """Süreç içi, senkron event bus.

    Event'ler yayınlandığı anda abonelere sırayla iletilir; kuyruk veya
    tekrar deneme yoktur, yani her abone bir event'i en fazla bir kez alır.
    Hata veren abone loglanır, diğerleri etkilenmez.
    """

    def __init__(self) -> None:
        """Initialize event bus."""
        self._subscribers: defaultdict[type[DomainEvent], list[Handler]] = defaultdict(list)

    def publish(self, event: DomainEvent) -> int:
        """
        Event'i abonelerine ilet.

        Returns:
            Event'i hatasız işleyen abone sayısı
        """
        name = type(event).__name__
        # Yayın sırasında abonelik değişebilir
        subscribers = tuple(self._subscribers.get(type(event), ()))

        delivered = 0
        for handler in subscribers:
            try:
                handler(event)
            except Exception as e:
                handler_name = getattr(handler, "__qualname__", repr(handler))
                logger.error(f"{name} aboneliği başarısız ({handler_name}): {e}")
            else:
                delivered += 1

        logger.debug(f"{name} yayınlandı: {delivered}/{len(subscribers)} abone")
        return delivered

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Event tipine abone ol."""
        self._subscribers[event_type].append(handler)

    def subscribe_many(self, event_types: Iterable[type[DomainEvent]], handler: Handler) -> None:
        """Aynı aboneyi birden fazla event tipine bağla."""
        for event_type in event_types:
            self.subscribe(event_type, handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> bool:
        """Aboneliği kaldır. Abone bulunamazsa False."""
        subscribers = self._subscribers.get(event_type, [])
        if handler not in subscribers:
            return False
        subscribers.remove(handler)
        return True

    def subscriber_count(self, event_type: type[DomainEvent]) -> int:
        """Event tipinin abone sayısı."""
        return len(self._subscribers.get(event_type, ()))
