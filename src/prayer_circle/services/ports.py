"""Service layer interfaces (ports)."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from prayer_circle.domain.events import DomainEvent
from prayer_circle.domain.models import Impression


class DocumentStoreError(Exception):
    """Belge deposu işlemi başarısız."""


class DocumentNotFoundError(DocumentStoreError):
    """Güncellenmek istenen belge yok."""


class _ServerTimestamp:
    """Yazma anında depo saatine çözülen işaretçi."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Increment:
    """Sayısal alanı atomik olarak artır."""

    amount: int = 1


@dataclass(frozen=True)
class ArrayUnion:
    """Listeye eksik değerleri ekle (küme birleşimi)."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class ArrayRemove:
    """Listeden değerleri çıkar (küme farkı)."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class DocumentSnapshot:
    """Bir belgenin okunduğu andaki hali."""

    id: str
    data: dict[str, Any] | None

    @property
    def exists(self) -> bool:
        """Belge var mı?"""
        return self.data is not None

    def to_dict(self) -> dict[str, Any]:
        """Belge verisi (yoksa boş dict)."""
        return dict(self.data or {})


class TransactionPort(ABC):
    """Tek seferde uygulanan (hep ya da hiç) yazma grubu."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Transaction içinde belge oku."""

    @abstractmethod
    def set(self, collection: str, doc_id: str | None, data: dict[str, Any]) -> str:
        """Belge yazmayı sıraya al; id verilmezse üretilir ve döndürülür."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Alan güncellemesini sıraya al."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Belge silmeyi sıraya al (yoksa sessizce geçilir)."""

    @abstractmethod
    def delete_collection(self, collection: str) -> int:
        """Koleksiyon silmeyi sıraya al; şu an içindeki belge sayısını döndür."""


class DocumentStorePort(ABC):
    """Belge deposu arayüzü (port).

    Koleksiyonlar ``/`` ile ayrılmış yollarla adreslenir, örn.
    ``prayers/<id>/impressions``. Güncellemelerde alan adları noktalı
    yol olabilir (``participants.users``); değerler yerine
    ``SERVER_TIMESTAMP``, ``Increment``, ``ArrayUnion`` ve ``ArrayRemove``
    kullanılabilir.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        """Belge oku."""

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Yeni belge ekle ve üretilen id'yi döndür."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Var olan belgeyi güncelle; belge yoksa DocumentNotFoundError."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Belgeyi sil (yoksa sessizce geç)."""

    @abstractmethod
    async def delete_collection(self, collection: str) -> int:
        """Koleksiyondaki tüm belgeleri sil, silinen sayısını döndür."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[DocumentSnapshot]:
        """Alan eşitliğine göre belgeleri listele."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[TransactionPort]:
        """Transaction başlat; blok hatasız biterse commit edilir."""


class NotifierPort(ABC):
    """Bildirim gönderme arayüzü (port). Teslimat garantisi yoktur."""

    @abstractmethod
    def notify_prayer_closed(self, prayer_id: str) -> None:
        """Dua kapandı bildirimi."""

    @abstractmethod
    def notify_user_added_to_prayer(self, user_id: str, prayer_id: str) -> None:
        """Kullanıcı duaya eklendi bildirimi."""

    @abstractmethod
    def notify_user_removed_from_prayer(self, user_id: str, prayer_id: str) -> None:
        """Kullanıcı duadan çıkarıldı bildirimi."""

    @abstractmethod
    def notify_new_impression(self, prayer_id: str, user_id: str) -> None:
        """Yeni izlenim bildirimi."""

    @abstractmethod
    def notify_hidden_impressions_revealed(
        self,
        prayer_id: str,
        impressions: Sequence[Impression],
    ) -> None:
        """Gizli izlenimler açığa çıktı bildirimi."""


class SchedulerPort(ABC):
    """Zamanlayıcı arayüzü (port)."""

    @abstractmethod
    def schedule_at(
        self,
        run_time: datetime,
        callback: Callable[..., Any],
        job_id: str,
        args: tuple[Any, ...] = (),
    ) -> None:
        """Belirtilen zamanda çalıştırılacak iş planla."""

    @abstractmethod
    def cancel(self, job_id: str) -> bool:
        """Planlanmış işi iptal et."""

    @abstractmethod
    def cancel_all(self) -> None:
        """Tüm işleri iptal et."""

    @abstractmethod
    def get_scheduled_jobs(self) -> list[tuple[str, datetime]]:
        """Planlanmış işleri listele."""


class EventBusPort(ABC):
    """Event bus arayüzü (port)."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> int:
        """Event yayınla, event'i işleyen abone sayısını döndür."""

    @abstractmethod
    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: Callable[[DomainEvent], None],
    ) -> None:
        """Event tipine abone ol."""
