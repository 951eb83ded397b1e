"""Application state and dependencies."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from prayer_circle.config import AppConfig
from prayer_circle.infrastructure.document_store import JsonDocumentStore
from prayer_circle.infrastructure.event_bus import InMemoryEventBus
from prayer_circle.infrastructure.notifier import EventBusNotifier, register_notification_logging
from prayer_circle.infrastructure.scheduler import APSchedulerAdapter
from prayer_circle.services.auto_close_service import AutoCloseService
from prayer_circle.services.prayer_service import OwnershipPolicy, PrayerService


@dataclass
class AppState:
    """Application state container."""

    config: AppConfig
    store: JsonDocumentStore
    event_bus: InMemoryEventBus
    notifier: EventBusNotifier
    scheduler_adapter: APSchedulerAdapter
    auto_close_service: AutoCloseService
    prayer_service: PrayerService
    started_at: datetime


# Global application state (singleton)
_app_state: AppState | None = None


async def initialize_app_state(config: AppConfig) -> AppState:
    """
    Initialize application state.

    Args:
        config: Uygulama ayarları

    Returns:
        Initialized AppState
    """
    global _app_state

    if _app_state is not None:
        return _app_state

    # Depo
    store = JsonDocumentStore(config.store_path)
    await store.load()

    # Infrastructure
    event_bus = InMemoryEventBus()
    register_notification_logging(event_bus)
    notifier = EventBusNotifier(event_bus)
    scheduler_adapter = APSchedulerAdapter()

    # Services
    auto_close_service = AutoCloseService(
        store=store,
        notifier=notifier,
        scheduler=scheduler_adapter,
    )

    prayer_service = PrayerService(
        store=store,
        notifier=notifier,
        auto_close=auto_close_service,
        ownership=OwnershipPolicy(
            require_owner_for_update=config.require_owner_for_update,
            require_owner_for_delete=config.require_owner_for_delete,
        ),
    )

    _app_state = AppState(
        config=config,
        store=store,
        event_bus=event_bus,
        notifier=notifier,
        scheduler_adapter=scheduler_adapter,
        auto_close_service=auto_close_service,
        prayer_service=prayer_service,
        started_at=datetime.now(UTC),
    )

    return _app_state


def get_app_state() -> AppState:
    """Get current application state."""
    if _app_state is None:
        raise RuntimeError("Application state not initialized")
    return _app_state


def get_prayer_service(state: Annotated[AppState, Depends(get_app_state)]) -> PrayerService:
    """Get prayer service."""
    return state.prayer_service


def get_current_user_id(
    x_user_id: Annotated[str | None, Header(description="Doğrulanmış kullanıcı id'si")] = None,
) -> str:
    """İsteği yapan kullanıcının id'si (kimlik doğrulama katmanı doldurur)."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id


CurrentUser = Annotated[str, Depends(get_current_user_id)]
Prayers = Annotated[PrayerService, Depends(get_prayer_service)]


async def shutdown_app_state() -> None:
    """Shutdown application state."""
    global _app_state

    if _app_state is not None:
        _app_state.scheduler_adapter.cancel_all()
        _app_state.scheduler_adapter.shutdown()
        _app_state = None
