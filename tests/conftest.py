"""Shared fixtures."""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

import pytest

from prayer_circle.domain.models import Impression
from prayer_circle.infrastructure.document_store import JsonDocumentStore
from prayer_circle.services.auto_close_service import AutoCloseService
from prayer_circle.services.ports import NotifierPort, SchedulerPort
from prayer_circle.services.prayer_service import OwnershipPolicy, PrayerService


class FakeScheduler(SchedulerPort):
    """Captures jobs so tests can fire them on demand."""

    def __init__(self) -> None:
        self.jobs: dict[str, tuple[datetime, Callable[..., Any], tuple[Any, ...]]] = {}

    def schedule_at(
        self,
        run_time: datetime,
        callback: Callable[..., Any],
        job_id: str,
        args: tuple[Any, ...] = (),
    ) -> None:
        self.jobs[job_id] = (run_time, callback, args)

    def cancel(self, job_id: str) -> bool:
        return self.jobs.pop(job_id, None) is not None

    def cancel_all(self) -> None:
        self.jobs.clear()

    def get_scheduled_jobs(self) -> list[tuple[str, datetime]]:
        return sorted(((job_id, job[0]) for job_id, job in self.jobs.items()), key=lambda x: x[1])

    async def fire(self, job_id: str) -> Any:
        _, callback, args = self.jobs.pop(job_id)
        return await callback(*args)


class RecordingNotifier(NotifierPort):
    """Records every notification call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def notify_prayer_closed(self, prayer_id: str) -> None:
        self.calls.append(("closed", prayer_id))

    def notify_user_added_to_prayer(self, user_id: str, prayer_id: str) -> None:
        self.calls.append(("added", user_id, prayer_id))

    def notify_user_removed_from_prayer(self, user_id: str, prayer_id: str) -> None:
        self.calls.append(("removed", user_id, prayer_id))

    def notify_new_impression(self, prayer_id: str, user_id: str) -> None:
        self.calls.append(("impression", prayer_id, user_id))

    def notify_hidden_impressions_revealed(
        self,
        prayer_id: str,
        impressions: Sequence[Impression],
    ) -> None:
        self.calls.append(("revealed", prayer_id, list(impressions)))

    def of_kind(self, kind: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def store() -> JsonDocumentStore:
    """In-memory document store."""
    return JsonDocumentStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def scheduler() -> FakeScheduler:
    """Fake scheduler."""
    return FakeScheduler()


@pytest.fixture
def auto_close(
    store: JsonDocumentStore,
    notifier: RecordingNotifier,
    scheduler: FakeScheduler,
) -> AutoCloseService:
    """Auto-close service wired to fakes."""
    return AutoCloseService(store=store, notifier=notifier, scheduler=scheduler)


@pytest.fixture
def service(
    store: JsonDocumentStore,
    notifier: RecordingNotifier,
    auto_close: AutoCloseService,
) -> PrayerService:
    """Prayer service with default ownership policy."""
    return PrayerService(store=store, notifier=notifier, auto_close=auto_close)


@pytest.fixture
def strict_service(
    store: JsonDocumentStore,
    notifier: RecordingNotifier,
    auto_close: AutoCloseService,
) -> PrayerService:
    """Prayer service that requires ownership for update and delete."""
    return PrayerService(
        store=store,
        notifier=notifier,
        auto_close=auto_close,
        ownership=OwnershipPolicy(require_owner_for_update=True, require_owner_for_delete=True),
    )
