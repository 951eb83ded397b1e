"""API Routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from prayer_circle import __version__
from prayer_circle.api.dependencies import (
    AppState,
    CurrentUser,
    Prayers,
    get_app_state,
    get_current_user_id,
)
from prayer_circle.api.schemas import (
    ErrorResponse,
    HealthSchema,
    HiddenPrayerSchema,
    ImpressionCreatedResponse,
    ImpressionCreateSchema,
    ImpressionSchema,
    MessageResponse,
    ParticipantsSchema,
    PrayerCreateSchema,
    PrayerSchema,
    PrayerUpdateSchema,
    ScheduledJobSchema,
)
from prayer_circle.domain.models import Participants, Prayer
from prayer_circle.services.auto_close_service import AutoCloseService

router = APIRouter(
    prefix="/prayers",
    tags=["prayers"],
    dependencies=[Depends(get_current_user_id)],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)

system_router = APIRouter(tags=["system"])


def _prayer_body(prayer: Prayer) -> dict[str, Any]:
    """Duayı okuyucuya gösterilecek şekilde serileştir."""
    schema = HiddenPrayerSchema if prayer.is_concealed else PrayerSchema
    return schema.model_validate(prayer.to_visible_dict()).model_dump(mode="json", by_alias=True)


# ============== Prayers ==============


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_prayer(
    request: PrayerCreateSchema,
    user_id: CurrentUser,
    prayers: Prayers,
) -> dict[str, Any]:
    """Yeni dua oluştur."""
    participants = request.participants or ParticipantsSchema()
    prayer = await prayers.create(
        title=request.title,
        description=request.description,
        end_date_time=request.end_date_time,
        prayer_access=request.prayer_access,
        prayer_type=request.prayer_type,
        participants=Participants(
            users=tuple(participants.users),
            groups=tuple(participants.groups),
        ),
        creator_id=user_id,
    )
    # Oluşturan kişi sahibi olduğu için tüm alanlar döner
    return PrayerSchema.model_validate(prayer.to_dict()).model_dump(mode="json", by_alias=True)


@router.get("")
async def list_prayers(
    prayers: Prayers,
    prayer_type: Annotated[str | None, Query(alias="type")] = None,
) -> list[dict[str, Any]]:
    """Duaları listele (type=hidden|visible ile filtrelenebilir)."""
    return [_prayer_body(prayer) for prayer in await prayers.list_prayers(prayer_type)]


@router.get("/{prayer_id}", responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}})
async def get_prayer(prayer_id: str, prayers: Prayers) -> dict[str, Any]:
    """Duayı getir. Gizli ve açık dualarda detaylar saklanır."""
    return _prayer_body(await prayers.get(prayer_id))


@router.put(
    "/{prayer_id}",
    response_model=MessageResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_prayer(
    prayer_id: str,
    request: PrayerUpdateSchema,
    user_id: CurrentUser,
    prayers: Prayers,
) -> MessageResponse:
    """Duayı güncelle."""
    await prayers.update(
        prayer_id,
        requester_id=user_id,
        title=request.title,
        description=request.description,
        end_date_time=request.end_date_time,
        prayer_access=request.prayer_access,
        prayer_type=request.prayer_type,
    )
    return MessageResponse(message="Prayer updated successfully")


@router.delete(
    "/{prayer_id}",
    response_model=MessageResponse,
    responses={status.HTTP_403_FORBIDDEN: {"model": ErrorResponse}},
)
async def delete_prayer(prayer_id: str, user_id: CurrentUser, prayers: Prayers) -> MessageResponse:
    """Duayı sil."""
    await prayers.delete(prayer_id, requester_id=user_id)
    return MessageResponse(message="Prayer deleted successfully")


@router.post(
    "/{prayer_id}/close",
    response_model=MessageResponse,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def close_prayer(prayer_id: str, user_id: CurrentUser, prayers: Prayers) -> MessageResponse:
    """Duayı kapat (sadece sahibi)."""
    await prayers.close(prayer_id, requester_id=user_id)
    return MessageResponse(message="Prayer closed successfully")


# ============== Participants ==============


@router.post(
    "/{prayer_id}/participants",
    response_model=MessageResponse,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def add_participants(
    prayer_id: str,
    request: ParticipantsSchema,
    user_id: CurrentUser,
    prayers: Prayers,
) -> MessageResponse:
    """Katılımcı ekle."""
    await prayers.add_participants(prayer_id, user_id, request.users, request.groups)
    return MessageResponse(message="Participants added successfully")


@router.delete(
    "/{prayer_id}/participants",
    response_model=MessageResponse,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def remove_participants(
    prayer_id: str,
    request: ParticipantsSchema,
    user_id: CurrentUser,
    prayers: Prayers,
) -> MessageResponse:
    """Katılımcı çıkar."""
    await prayers.remove_participants(prayer_id, user_id, request.users, request.groups)
    return MessageResponse(message="Participants removed successfully")


# ============== Impressions ==============


@router.post(
    "/{prayer_id}/impressions",
    status_code=status.HTTP_201_CREATED,
    response_model=ImpressionCreatedResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def add_impression(
    prayer_id: str,
    request: ImpressionCreateSchema,
    user_id: CurrentUser,
    prayers: Prayers,
) -> ImpressionCreatedResponse:
    """İzlenim ekle."""
    impression = await prayers.add_impression(prayer_id, user_id, request.content)
    return ImpressionCreatedResponse(message="Impression added successfully", id=impression.id)


@router.get(
    "/{prayer_id}/impressions",
    response_model=list[ImpressionSchema],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def list_impressions(prayer_id: str, prayers: Prayers) -> list[ImpressionSchema]:
    """İzlenimleri listele. Gizli dualarda kapanıştan sonra açılır."""
    return [
        ImpressionSchema.model_validate(impression.to_dict())
        for impression in await prayers.list_impressions(prayer_id)
    ]


# ============== Scheduler ==============


@system_router.get("/scheduler/jobs", response_model=list[ScheduledJobSchema])
async def get_scheduled_jobs(
    state: Annotated[AppState, Depends(get_app_state)],
) -> list[ScheduledJobSchema]:
    """Bekleyen otomatik kapanış işlerini listele."""
    prefix = AutoCloseService.make_job_id("")
    jobs = state.auto_close_service.scheduled_jobs()
    return [
        ScheduledJobSchema(
            job_id=job_id,
            run_time=run_time.strftime("%Y-%m-%d %H:%M:%S"),
            prayer_id=job_id.removeprefix(prefix),
        )
        for job_id, run_time in jobs
    ]


@system_router.get("/health", response_model=HealthSchema)
async def health_check(state: Annotated[AppState, Depends(get_app_state)]) -> HealthSchema:
    """Health check endpoint."""
    policy = state.prayer_service.ownership
    return HealthSchema(
        status="healthy",
        version=__version__,
        started_at=state.started_at,
        store=str(state.store.file_path) if state.store.is_persistent else "memory",
        persistent=state.store.is_persistent,
        pending_auto_close_jobs=len(state.auto_close_service.scheduled_jobs()),
        require_owner_for_update=policy.require_owner_for_update,
        require_owner_for_delete=policy.require_owner_for_delete,
    )
