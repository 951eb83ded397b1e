"""Pydantic schemas for API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON'da camelCase alan adları kullanan temel şema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParticipantsSchema(CamelModel):
    """Katılımcılar şeması."""

    users: list[str] = Field(default_factory=list, description="Kullanıcı id'leri")
    groups: list[str] = Field(default_factory=list, description="Grup id'leri")


class PrayerCreateSchema(CamelModel):
    """Dua oluşturma şeması.

    Tür ve erişim alanları serbest metin olarak alınır; geçersiz değerler
    servis katmanında 400 ile reddedilir.
    """

    title: str
    description: str
    end_date_time: datetime | None = None
    prayer_access: str | None = Field(default=None, description="private | public")
    participants: ParticipantsSchema | None = None
    prayer_type: str | None = Field(default=None, description="hidden | visible")


class PrayerUpdateSchema(CamelModel):
    """Dua güncelleme şeması (partial update, erişim zorunlu)."""

    title: str | None = None
    description: str | None = None
    end_date_time: datetime | None = None
    prayer_access: str | None = Field(default=None, description="private | public")
    prayer_type: str | None = Field(default=None, description="hidden | visible")


class PrayerSchema(CamelModel):
    """Tüm alanlarıyla dua."""

    id: str
    title: str
    description: str
    end_date_time: datetime | None = None
    prayer_access: str
    creator_id: str
    participants: ParticipantsSchema
    prayer_type: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    is_open: bool
    impression_count: int


class HiddenPrayerSchema(CamelModel):
    """Gizli ve açık duanın dışarı verilen hali."""

    id: str
    title: str
    description: str
    prayer_type: str
    impression_count: int
    is_open: bool


class ImpressionCreateSchema(CamelModel):
    """İzlenim ekleme isteği."""

    content: str | None = None


class ImpressionSchema(CamelModel):
    """İzlenim şeması."""

    id: str
    content: str
    user_id: str
    created_at: datetime | None = None


class ScheduledJobSchema(BaseModel):
    """Planlanmış iş şeması."""

    job_id: str
    run_time: str
    prayer_id: str


class MessageResponse(BaseModel):
    """Başarılı işlem yanıtı."""

    message: str


class ImpressionCreatedResponse(MessageResponse):
    """İzlenim ekleme yanıtı."""

    id: str


class ErrorResponse(BaseModel):
    """Hata yanıtı."""

    error: str


class HealthSchema(BaseModel):
    """Servis durumu."""

    status: str
    version: str
    started_at: datetime
    store: str
    persistent: bool
    pending_auto_close_jobs: int
    require_owner_for_update: bool
    require_owner_for_delete: bool
