"""Service layer - Business logic."""

from prayer_circle.services.auto_close_service import AutoCloseService
from prayer_circle.services.ports import (
    DocumentStorePort,
    EventBusPort,
    NotifierPort,
    SchedulerPort,
    TransactionPort,
)
from prayer_circle.services.prayer_service import OwnershipPolicy, PrayerService

__all__ = [
    "AutoCloseService",
    "DocumentStorePort",
    "EventBusPort",
    "NotifierPort",
    "OwnershipPolicy",
    "PrayerService",
    "SchedulerPort",
    "TransactionPort",
]
