"""APScheduler based scheduler implementation."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from prayer_circle.services.ports import SchedulerPort

logger = logging.getLogger(__name__)


def _log_job_event(event: JobExecutionEvent) -> None:
    if event.code == EVENT_JOB_MISSED:
        logger.warning(f"İş kaçırıldı: {event.job_id} ({event.scheduled_run_time})")
    elif event.exception is not None:
        logger.error(f"İş hata verdi: {event.job_id}: {event.exception}")


class APSchedulerAdapter(SchedulerPort):
    """Tek seferlik (DateTrigger) işler için APScheduler adaptörü.

    İşler yalnızca bellekte tutulur. Kalıcılık zamanlayıcının değil
    çağıranın işidir: otomatik kapanışta bitiş zamanı dua belgesinde
    saklanır ve açılışta yeniden planlanır.

    Aynı ``job_id`` ile tekrar planlamak eski işin yerine geçer. Varsayılan
    olarak geç kalan iş ne kadar gecikirse gecikesin yine çalıştırılır.
    """

    def __init__(self, misfire_grace_time: int | None = None) -> None:
        """
        Initialize scheduler.

        Args:
            misfire_grace_time: Geç kalan işin hâlâ çalıştırılacağı süre (sn, None = sınırsız)
        """
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": misfire_grace_time,
            },
            timezone="UTC",
        )
        self._scheduler.add_listener(_log_job_event, EVENT_JOB_ERROR | EVENT_JOB_MISSED)

    @property
    def running(self) -> bool:
        """Scheduler çalışıyor mu?"""
        return self._scheduler.running

    def start(self) -> None:
        """Scheduler'ı başlat (çalışan bir event loop içinde çağrılmalı)."""
        if self.running:
            return
        self._scheduler.start()
        logger.info(f"APScheduler başlatıldı ({len(self._scheduler.get_jobs())} bekleyen iş).")

    def shutdown(self) -> None:
        """Scheduler'ı kapat; bekleyen işler bırakılır."""
        if not self.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("APScheduler kapatıldı.")

    def schedule_at(
        self,
        run_time: datetime,
        callback: Callable[..., Any],
        job_id: str,
        args: tuple[Any, ...] = (),
    ) -> None:
        """İşi ``run_time`` anında bir kez çalışacak şekilde planla."""
        self.start()
        self._scheduler.add_job(
            callback,
            trigger=DateTrigger(run_date=run_time),
            args=list(args),
            id=job_id,
            replace_existing=True,
        )
        logger.debug(f"İş planlandı: {job_id} -> {run_time.isoformat()}")

    def cancel(self, job_id: str) -> bool:
        """Bekleyen işi kaldır. İş yoksa (çalışmış veya hiç planlanmamış) False."""
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        logger.debug(f"İş iptal edildi: {job_id}")
        return True

    def cancel_all(self) -> None:
        """Tüm bekleyen işleri kaldır."""
        count = len(self._scheduler.get_jobs())
        self._scheduler.remove_all_jobs()
        logger.info(f"{count} planlanmış iş iptal edildi.")

    def get_scheduled_jobs(self) -> list[tuple[str, datetime]]:
        """Bekleyen işler, en yakın çalışma zamanına göre sıralı."""
        pending = [
            (job.id, job.next_run_time)
            for job in self._scheduler.get_jobs()
            if job.next_run_time is not None
        ]
        pending.sort(key=lambda item: item[1])
        return pending
