"""Domain layer - Business entities and value objects."""

from prayer_circle.domain.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    OperationFailedError,
    PrayerCircleError,
    ValidationError,
)
from prayer_circle.domain.models import (
    Impression,
    Participants,
    Prayer,
    PrayerAccess,
    PrayerType,
)

__all__ = [
    "ForbiddenError",
    "Impression",
    "InvalidStateError",
    "NotFoundError",
    "OperationFailedError",
    "Participants",
    "Prayer",
    "PrayerAccess",
    "PrayerCircleError",
    "PrayerType",
    "ValidationError",
]
