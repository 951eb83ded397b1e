"""Domain models and value objects."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Self

from prayer_circle.domain.exceptions import ValidationError

# Gizli ve açık bir dua okunurken dışarı verilen alanlar
HIDDEN_PRAYER_FIELDS = (
    "id",
    "title",
    "description",
    "prayerType",
    "impressionCount",
    "isOpen",
)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Naive datetime'ı UTC kabul et, diğerlerini UTC'ye çevir."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except (OverflowError, ValueError) as e:
        raise ValidationError("Invalid end date time") from e


class PrayerType(str, Enum):
    """Dua türleri."""

    HIDDEN = "hidden"
    VISIBLE = "visible"

    @classmethod
    def parse(cls, value: str | None) -> Self:
        """Değeri doğrula ve enum'a çevir."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Invalid prayer type") from None

    @classmethod
    def is_valid(cls, value: str | None) -> bool:
        """Tanımlı bir tür mü?"""
        return value in {t.value for t in cls}


class PrayerAccess(str, Enum):
    """Dua erişim seviyeleri."""

    PRIVATE = "private"
    PUBLIC = "public"

    @classmethod
    def parse(cls, value: str | None) -> Self:
        """Değeri doğrula ve enum'a çevir."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Invalid prayer access modifier") from None


def _unique(values: list[str] | tuple[str, ...] | None) -> tuple[str, ...]:
    """Sırayı koruyarak tekrarları at."""
    return tuple(dict.fromkeys(values or ()))


@dataclass(frozen=True)
class Participants:
    """Duaya katılan kullanıcılar ve gruplar (küme semantiği)."""

    users: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Tekrarlanan id'leri tekilleştir."""
        object.__setattr__(self, "users", _unique(self.users))
        object.__setattr__(self, "groups", _unique(self.groups))

    def to_dict(self) -> dict[str, list[str]]:
        """Dictionary olarak döndür."""
        return {"users": list(self.users), "groups": list(self.groups)}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Self:
        """Dictionary'den oluştur."""
        data = data or {}
        return cls(users=tuple(data.get("users") or ()), groups=tuple(data.get("groups") or ()))


@dataclass(frozen=True)
class Prayer:
    """Dua isteği."""

    id: str
    title: str
    description: str
    prayer_access: PrayerAccess
    prayer_type: PrayerType
    creator_id: str
    participants: Participants = field(default_factory=Participants)
    end_date_time: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    is_open: bool = True
    impression_count: int = 0

    @property
    def is_concealed(self) -> bool:
        """Gizli dua hâlâ açıksa detaylar saklanır."""
        return self.prayer_type is PrayerType.HIDDEN and self.is_open

    def is_owned_by(self, user_id: str | None) -> bool:
        """Kullanıcı duanın sahibi mi?"""
        return user_id is not None and self.creator_id == user_id

    def to_document(self) -> dict[str, Any]:
        """Depoya yazılacak belge (id hariç)."""
        return {
            "title": self.title,
            "description": self.description,
            "endDateTime": self.end_date_time,
            "prayerAccess": self.prayer_access.value,
            "creatorId": self.creator_id,
            "participants": self.participants.to_dict(),
            "prayerType": self.prayer_type.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "closedAt": self.closed_at,
            "isOpen": self.is_open,
            "impressionCount": self.impression_count,
        }

    def to_dict(self) -> dict[str, Any]:
        """Tüm alanlarla dictionary olarak döndür."""
        return {"id": self.id, **self.to_document()}

    def to_visible_dict(self) -> dict[str, Any]:
        """Okuyucuya gösterilecek hali; gizli ve açık dualar kısıtlanır."""
        data = self.to_dict()
        if self.is_concealed:
            return {key: data[key] for key in HIDDEN_PRAYER_FIELDS}
        return data

    @classmethod
    def from_dict(cls, prayer_id: str, data: dict[str, Any]) -> Self:
        """Depo belgesinden oluştur."""
        return cls(
            id=prayer_id,
            title=data.get("title", ""),
            description=data.get("description", ""),
            prayer_access=PrayerAccess(data["prayerAccess"]),
            prayer_type=PrayerType(data["prayerType"]),
            creator_id=data["creatorId"],
            participants=Participants.from_dict(data.get("participants")),
            end_date_time=ensure_utc(data.get("endDateTime")),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            closed_at=data.get("closedAt"),
            is_open=bool(data.get("isOpen", True)),
            impression_count=int(data.get("impressionCount", 0)),
        )


@dataclass(frozen=True)
class Impression:
    """Duaya bırakılan izlenim (yorum/tepki)."""

    id: str
    content: str
    user_id: str
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Dictionary olarak döndür."""
        return {
            "id": self.id,
            "content": self.content,
            "userId": self.user_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, impression_id: str, data: dict[str, Any]) -> Self:
        """Depo belgesinden oluştur."""
        return cls(
            id=impression_id,
            content=data.get("content", ""),
            user_id=data["userId"],
            created_at=data.get("createdAt"),
        )
