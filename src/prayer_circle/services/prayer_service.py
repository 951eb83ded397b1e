"""Prayer resource service."""

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from prayer_circle.domain.exceptions import (
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)
from prayer_circle.domain.models import (
    Impression,
    Participants,
    Prayer,
    PrayerAccess,
    PrayerType,
    ensure_utc,
)
from prayer_circle.services.auto_close_service import (
    PRAYERS,
    AutoCloseService,
    impressions_collection,
)
from prayer_circle.services.ports import (
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    DocumentStoreError,
    DocumentStorePort,
    Increment,
    NotifierPort,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnershipPolicy:
    """Güncelleme ve silmede sahiplik kontrolü yapılsın mı?

    Kapatma ve katılımcı işlemleri her zaman sahiplik ister; güncelleme ve
    silme varsayılan olarak istemez.
    """

    require_owner_for_update: bool = False
    require_owner_for_delete: bool = False


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Depo hatalarını genel mesajlı OperationFailedError'a çevir."""
    try:
        yield
    except DocumentStoreError as e:
        logger.error(f"{message}: {e}")
        raise OperationFailedError(message) from e


class PrayerService:
    """Dua isteklerinin oluşturma, okuma, güncelleme ve yaşam döngüsü işlemleri."""

    def __init__(
        self,
        store: DocumentStorePort,
        notifier: NotifierPort,
        auto_close: AutoCloseService,
        ownership: OwnershipPolicy | None = None,
    ) -> None:
        """
        Initialize prayer service.

        Args:
            store: Belge deposu
            notifier: Bildirim adaptörü
            auto_close: Otomatik kapanış servisi
            ownership: Güncelleme/silme sahiplik politikası
        """
        self._store = store
        self._notifier = notifier
        self._auto_close = auto_close
        self._ownership = ownership or OwnershipPolicy()

    @property
    def ownership(self) -> OwnershipPolicy:
        """Sahiplik politikası."""
        return self._ownership

    def _notify(self, send: Callable[..., None], *args: Any) -> None:
        """Bildirim gönder; hata isteği bozmaz."""
        try:
            send(*args)
        except Exception as e:
            logger.error(f"Bildirim gönderilemedi ({getattr(send, '__name__', send)}): {e}")

    async def _load(self, prayer_id: str) -> Prayer:
        snapshot = await self._store.get(PRAYERS, prayer_id)
        if not snapshot.exists:
            raise NotFoundError("Prayer not found")
        return Prayer.from_dict(snapshot.id, snapshot.to_dict())

    async def _load_owned(self, prayer_id: str, requester_id: str | None, action: str) -> Prayer:
        prayer = await self._load(prayer_id)
        if not prayer.is_owned_by(requester_id):
            raise ForbiddenError(f"Only the prayer creator can {action}")
        return prayer

    async def create(
        self,
        *,
        title: str,
        description: str,
        prayer_access: str | None,
        prayer_type: str | None,
        creator_id: str,
        end_date_time: datetime | None = None,
        participants: Participants | None = None,
    ) -> Prayer:
        """
        Yeni dua oluştur.

        Bitiş zamanı verilirse otomatik kapanış planlanır.

        Raises:
            ValidationError: Tür veya erişim değeri geçersizse
        """
        parsed_type = PrayerType.parse(prayer_type)
        parsed_access = PrayerAccess.parse(prayer_access)
        end_date_time = ensure_utc(end_date_time)

        draft = Prayer(
            id="",
            title=title,
            description=description,
            prayer_access=parsed_access,
            prayer_type=parsed_type,
            creator_id=creator_id,
            participants=participants or Participants(),
            end_date_time=end_date_time,
        )
        document = draft.to_document()
        document["createdAt"] = SERVER_TIMESTAMP

        with _store_errors("Failed to create prayer"):
            prayer_id = await self._store.add(PRAYERS, document)
            prayer = await self._load(prayer_id)

        logger.info(f"Dua oluşturuldu: {prayer_id} ({parsed_type.value}, {creator_id})")

        if end_date_time is not None:
            self._auto_close.schedule(prayer_id, end_date_time)

        return prayer

    async def get(self, prayer_id: str) -> Prayer:
        """
        Duayı getir.

        Raises:
            NotFoundError: Dua yoksa
        """
        with _store_errors("Failed to retrieve prayer"):
            return await self._load(prayer_id)

    async def update(
        self,
        prayer_id: str,
        *,
        prayer_access: str | None,
        requester_id: str | None = None,
        title: str | None = None,
        description: str | None = None,
        end_date_time: datetime | None = None,
        prayer_type: str | None = None,
    ) -> Prayer:
        """
        Verilen alanları güncelle.

        ``isOpen`` ve ``impressionCount`` hiçbir zaman değiştirilmez.

        Raises:
            ValidationError: Tür veya erişim değeri geçersizse
            NotFoundError: Dua yoksa
            ForbiddenError: Politika sahiplik istiyorsa ve istek sahibi değilse
        """
        if prayer_type is not None:
            PrayerType.parse(prayer_type)
        PrayerAccess.parse(prayer_access)

        with _store_errors("Failed to update prayer"):
            if self._ownership.require_owner_for_update:
                prayer = await self._load_owned(prayer_id, requester_id, "update the prayer")
            else:
                prayer = await self._load(prayer_id)

            end_date_time = ensure_utc(end_date_time)
            changes: dict[str, Any] = {
                "prayerAccess": prayer_access,
                "updatedAt": SERVER_TIMESTAMP,
            }
            if title is not None:
                changes["title"] = title
            if description is not None:
                changes["description"] = description
            if end_date_time is not None:
                changes["endDateTime"] = end_date_time
            if prayer_type is not None:
                changes["prayerType"] = prayer_type

            await self._store.update(PRAYERS, prayer_id, changes)
            updated = await self._load(prayer_id)

        logger.info(f"Dua güncellendi: {prayer_id} ({', '.join(sorted(changes))})")

        if (
            updated.is_open
            and end_date_time is not None
            and end_date_time != prayer.end_date_time
        ):
            self._auto_close.schedule(prayer_id, end_date_time)

        return updated

    async def delete(self, prayer_id: str, requester_id: str | None = None) -> None:
        """
        Duayı ve izlenimlerini sil. Olmayan dua için sessizce geçer.

        Raises:
            ForbiddenError: Politika sahiplik istiyorsa ve istek sahibi değilse
        """
        with _store_errors("Failed to delete prayer"):
            async with self._store.transaction() as txn:
                if self._ownership.require_owner_for_delete:
                    snapshot = await txn.get(PRAYERS, prayer_id)
                    if snapshot.exists and snapshot.to_dict().get("creatorId") != requester_id:
                        raise ForbiddenError("Only the prayer creator can delete the prayer")

                removed = txn.delete_collection(impressions_collection(prayer_id))
                txn.delete(PRAYERS, prayer_id)

        self._auto_close.cancel(prayer_id)
        logger.info(f"Dua silindi: {prayer_id} ({removed} izlenim)")

    async def list_prayers(self, prayer_type: str | None = None) -> list[Prayer]:
        """Duaları listele; tanınmayan tür filtresi yok sayılır."""
        filters = {"prayerType": prayer_type} if PrayerType.is_valid(prayer_type) else None
        with _store_errors("Failed to list prayers"):
            snapshots = await self._store.query(PRAYERS, filters)
        return [Prayer.from_dict(s.id, s.to_dict()) for s in snapshots]

    async def close(self, prayer_id: str, requester_id: str | None) -> Prayer:
        """
        Duayı kapat (sadece sahibi). Zaten kapalıysa bir şey yapmaz.

        Raises:
            NotFoundError: Dua yoksa
            ForbiddenError: İstek sahibi duanın sahibi değilse
        """
        with _store_errors("Failed to close prayer"):
            prayer = await self._load_owned(prayer_id, requester_id, "close the prayer")
            if not prayer.is_open:
                logger.info(f"Dua zaten kapalı: {prayer_id}")
                return prayer

            await self._store.update(
                PRAYERS,
                prayer_id,
                {"isOpen": False, "closedAt": SERVER_TIMESTAMP},
            )
            closed = await self._load(prayer_id)

        self._auto_close.cancel(prayer_id)
        logger.info(f"Dua kapatıldı: {prayer_id}")
        self._notify(self._notifier.notify_prayer_closed, prayer_id)
        return closed

    async def add_participants(
        self,
        prayer_id: str,
        requester_id: str | None,
        users: Sequence[str] = (),
        groups: Sequence[str] = (),
    ) -> Prayer:
        """
        Katılımcı ekle (küme birleşimi) ve eklenen her kullanıcıya bildir.

        Raises:
            NotFoundError: Dua yoksa
            ForbiddenError: İstek sahibi duanın sahibi değilse
        """
        with _store_errors("Failed to add participants"):
            await self._load_owned(prayer_id, requester_id, "add participants")
            await self._store.update(
                PRAYERS,
                prayer_id,
                {
                    "participants.users": ArrayUnion(tuple(users)),
                    "participants.groups": ArrayUnion(tuple(groups)),
                },
            )
            updated = await self._load(prayer_id)

        logger.info(
            f"Katılımcı eklendi: {prayer_id} ({len(users)} kullanıcı, {len(groups)} grup)"
        )
        for user_id in users:
            self._notify(self._notifier.notify_user_added_to_prayer, user_id, prayer_id)
        return updated

    async def remove_participants(
        self,
        prayer_id: str,
        requester_id: str | None,
        users: Sequence[str] = (),
        groups: Sequence[str] = (),
    ) -> Prayer:
        """
        Katılımcı çıkar (küme farkı) ve çıkarılan her kullanıcıya bildir.

        Raises:
            NotFoundError: Dua yoksa
            ForbiddenError: İstek sahibi duanın sahibi değilse
        """
        with _store_errors("Failed to remove participants"):
            await self._load_owned(prayer_id, requester_id, "remove participants")
            await self._store.update(
                PRAYERS,
                prayer_id,
                {
                    "participants.users": ArrayRemove(tuple(users)),
                    "participants.groups": ArrayRemove(tuple(groups)),
                },
            )
            updated = await self._load(prayer_id)

        logger.info(
            f"Katılımcı çıkarıldı: {prayer_id} ({len(users)} kullanıcı, {len(groups)} grup)"
        )
        for user_id in users:
            self._notify(self._notifier.notify_user_removed_from_prayer, user_id, prayer_id)
        return updated

    async def add_impression(
        self,
        prayer_id: str,
        requester_id: str,
        content: str | None,
    ) -> Impression:
        """
        İzlenim ekle ve sayacı aynı transaction içinde bir artır.

        Raises:
            ValidationError: İçerik boşsa
            NotFoundError: Dua yoksa
            InvalidStateError: Dua kapalıysa
        """
        if not content or not content.strip():
            raise ValidationError("Impression content is required")

        with _store_errors("Failed to add impression"):
            async with self._store.transaction() as txn:
                snapshot = await txn.get(PRAYERS, prayer_id)
                if not snapshot.exists:
                    raise NotFoundError("Prayer not found")
                prayer = Prayer.from_dict(snapshot.id, snapshot.to_dict())
                if not prayer.is_open:
                    raise InvalidStateError("Prayer is closed for impressions")

                impression_id = txn.set(
                    impressions_collection(prayer_id),
                    None,
                    {"content": content, "userId": requester_id, "createdAt": SERVER_TIMESTAMP},
                )
                txn.update(PRAYERS, prayer_id, {"impressionCount": Increment(1)})

            stored = await self._store.get(impressions_collection(prayer_id), impression_id)

        impression = Impression.from_dict(impression_id, stored.to_dict())
        logger.info(f"İzlenim eklendi: {prayer_id}/{impression_id}")

        if prayer.prayer_type is PrayerType.VISIBLE:
            self._notify(self._notifier.notify_new_impression, prayer_id, requester_id)
        return impression

    async def list_impressions(self, prayer_id: str) -> list[Impression]:
        """
        Duanın izlenimlerini getir.

        Raises:
            NotFoundError: Dua yoksa
            InvalidStateError: Gizli dua hâlâ açıksa
        """
        with _store_errors("Failed to list impressions"):
            prayer = await self._load(prayer_id)
            if prayer.is_concealed:
                raise InvalidStateError("Impressions are hidden until the prayer closes")
            return await self._auto_close.load_impressions(prayer_id)
