"""Infrastructure layer - Adapters and implementations."""

from prayer_circle.infrastructure.document_store import JsonDocumentStore
from prayer_circle.infrastructure.event_bus import InMemoryEventBus
from prayer_circle.infrastructure.notifier import EventBusNotifier, register_notification_logging
from prayer_circle.infrastructure.scheduler import APSchedulerAdapter

__all__ = [
    "APSchedulerAdapter",
    "EventBusNotifier",
    "InMemoryEventBus",
    "JsonDocumentStore",
    "register_notification_logging",
]
