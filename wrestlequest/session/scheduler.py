import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.base import JobLookupError

logger = logging.getLogger(__name__)


def job_id(user_id: str, skill_index: int) -> str:
    return f"level-up-clear:{user_id}:{skill_index}"


class DeferredClearScheduler:
    """One-shot delayed jobs keyed by (user, skill).

    Scheduling a key that is already pending replaces the pending job.
    """

    def __init__(self, scheduler: BackgroundScheduler | None = None):
        self._scheduler = scheduler or BackgroundScheduler(timezone=UTC)
        self._owns_scheduler = scheduler is None

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()

    def shutdown(self) -> None:
        if self._owns_scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def schedule(self, user_id: str, skill_index: int, delay_seconds: float, func: Callable[[], None]) -> None:
        self.start()
        self._scheduler.add_job(
            func,
            "date",
            run_date=datetime.now(UTC) + timedelta(seconds=delay_seconds),
            id=job_id(user_id, skill_index),
            replace_existing=True,
            misfire_grace_time=None,
        )
        logger.debug("Scheduled level-up clear for %s skill %d in %.2fs", user_id, skill_index, delay_seconds)

    def cancel(self, user_id: str, skill_index: int) -> bool:
        try:
            self._scheduler.remove_job(job_id(user_id, skill_index))
        except JobLookupError:
            return False
        return True
