"""Auto-close scheduling for prayers with an end time."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from prayer_circle.domain.models import Impression, Prayer, PrayerType, ensure_utc
from prayer_circle.services.ports import (
    SERVER_TIMESTAMP,
    DocumentStoreError,
    DocumentStorePort,
    NotifierPort,
    SchedulerPort,
)

logger = logging.getLogger(__name__)

PRAYERS = "prayers"


def impressions_collection(prayer_id: str) -> str:
    """Bir duanın izlenim alt koleksiyonu."""
    return f"{PRAYERS}/{prayer_id}/impressions"


class AutoCloseService:
    """Bitiş zamanı gelen duaları otomatik kapatan servis.

    Bitiş zamanı dua belgesinde (``endDateTime``) saklandığı için
    planlanmış işler kalıcıdır: açılışta ``recover`` açık duaları tarar ve
    işleri yeniden kurar.
    """

    def __init__(
        self,
        store: DocumentStorePort,
        notifier: NotifierPort,
        scheduler: SchedulerPort,
    ) -> None:
        """
        Initialize auto-close service.

        Args:
            store: Belge deposu
            notifier: Bildirim adaptörü
            scheduler: Zamanlayıcı adaptörü
        """
        self._store = store
        self._notifier = notifier
        self._scheduler = scheduler

    @staticmethod
    def make_job_id(prayer_id: str) -> str:
        """İş için benzersiz ID oluştur."""
        return f"auto_close_{prayer_id}"

    def schedule(self, prayer_id: str, end_date_time: datetime) -> datetime:
        """
        Duanın otomatik kapanışını planla.

        Geçmiş bir zaman verilirse iş hemen çalışır.

        Returns:
            İşin çalışacağı zaman
        """
        now = datetime.now(UTC)
        run_time = max(ensure_utc(end_date_time) or now, now)
        self._scheduler.schedule_at(
            run_time=run_time,
            callback=self.close_automatically,
            job_id=self.make_job_id(prayer_id),
            args=(prayer_id,),
        )
        logger.debug(f"Otomatik kapanış planlandı: {prayer_id} -> {run_time}")
        return run_time

    def cancel(self, prayer_id: str) -> bool:
        """Bekleyen otomatik kapanışı iptal et."""
        return self._scheduler.cancel(self.make_job_id(prayer_id))

    def scheduled_jobs(self) -> list[tuple[str, datetime]]:
        """Planlanmış işleri listele."""
        return self._scheduler.get_scheduled_jobs()

    def _notify(self, send: Callable[..., None], *args: Any) -> None:
        """Bildirim gönder; biri başarısız olsa da diğerleri gider."""
        try:
            send(*args)
        except Exception as e:
            logger.error(f"Bildirim gönderilemedi ({getattr(send, '__name__', send)}): {e}")

    async def close_automatically(self, prayer_id: str) -> bool:
        """
        Duayı kapat ve bildirimleri gönder.

        Arka plan işi olduğu için hatalar loglanır, dışarı fırlatılmaz.

        Returns:
            Dua bu çağrıda kapatıldıysa True
        """
        try:
            snapshot = await self._store.get(PRAYERS, prayer_id)
            if not snapshot.exists:
                logger.info(f"Otomatik kapanış atlandı, dua silinmiş: {prayer_id}")
                return False

            prayer = Prayer.from_dict(snapshot.id, snapshot.to_dict())
            if not prayer.is_open:
                logger.debug(f"Otomatik kapanış atlandı, dua zaten kapalı: {prayer_id}")
                return False

            await self._store.update(
                PRAYERS,
                prayer_id,
                {"isOpen": False, "closedAt": SERVER_TIMESTAMP},
            )
            logger.info(f"Dua otomatik kapatıldı: {prayer_id}")

            self._notify(self._notifier.notify_prayer_closed, prayer_id)

            if prayer.prayer_type is PrayerType.HIDDEN:
                impressions = await self.load_impressions(prayer_id)
                self._notify(
                    self._notifier.notify_hidden_impressions_revealed, prayer_id, impressions
                )
            return True
        except Exception as e:
            logger.error(f"Dua otomatik kapatılamadı ({prayer_id}): {e}")
            return False

    async def load_impressions(self, prayer_id: str) -> list[Impression]:
        """Duanın tüm izlenimlerini oluşturulma sırasıyla getir."""
        snapshots = await self._store.query(impressions_collection(prayer_id))
        impressions = [Impression.from_dict(s.id, s.to_dict()) for s in snapshots]
        return sorted(
            impressions,
            key=lambda i: i.created_at or datetime.min.replace(tzinfo=UTC),
        )

    async def recover(self) -> int:
        """
        Açık ve bitiş zamanı olan duaları yeniden planla.

        Returns:
            Planlanan iş sayısı
        """
        try:
            snapshots = await self._store.query(PRAYERS, {"isOpen": True})
        except DocumentStoreError as e:
            logger.error(f"Kurtarma taraması başarısız: {e}")
            return 0

        scheduled = 0
        for snapshot in snapshots:
            end_date_time = ensure_utc(snapshot.to_dict().get("endDateTime"))
            if end_date_time is None:
                continue
            self.schedule(snapshot.id, end_date_time)
            scheduled += 1

        logger.info(f"Kurtarma taraması: {scheduled} otomatik kapanış planlandı.")
        return scheduled

    async def close_overdue(self, now: datetime | None = None) -> int:
        """
        Zamanlayıcı olmadan, süresi geçmiş açık duaları hemen kapat.

        Returns:
            Kapatılan dua sayısı
        """
        now = now or datetime.now(UTC)
        snapshots = await self._store.query(PRAYERS, {"isOpen": True})
        closed = 0
        for snapshot in snapshots:
            end_date_time = ensure_utc(snapshot.to_dict().get("endDateTime"))
            if end_date_time is not None and end_date_time <= now:
                if await self.close_automatically(snapshot.id):
                    closed += 1
        return closed
