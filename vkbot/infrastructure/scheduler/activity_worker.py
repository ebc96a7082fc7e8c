from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler


def _job_id(user_id: int) -> str:
    return f"offline:{user_id}"


class ActivityWorker:
    """
    Delayed "mark offline" jobs on an APScheduler background scheduler.

    One pending job per user: scheduling again replaces the pending run date.
    Job errors are logged by an error listener and never reach the caller.
    """

    def __init__(
        self,
        on_due: Callable[[int], None],
        delay_seconds: float,
        scheduler: BackgroundScheduler | None = None,
    ) -> None:
        self._on_due = on_due
        self._delay_seconds = delay_seconds
        self._scheduler = scheduler or BackgroundScheduler(timezone=timezone.utc)
        self._scheduler.add_listener(self._on_job_error, EVENT_JOB_ERROR)
        self._logger = logging.getLogger(__name__)

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self, paused: bool = False) -> None:
        if self._scheduler.running:
            return
        self._scheduler.start(paused=paused)
        self._logger.info("Activity worker started")

    def stop(self, wait: bool = True) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=wait)
        self._logger.info("Activity worker stopped")

    def schedule_offline(self, user_id: int) -> None:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=self._delay_seconds)
        self._scheduler.add_job(
            self._on_due,
            "date",
            run_date=run_date,
            args=[user_id],
            id=_job_id(user_id),
            replace_existing=True,
            misfire_grace_time=None,
        )

    def pending(self) -> int:
        return len(self._scheduler.get_jobs())

    def next_run(self, user_id: int) -> datetime | None:
        job = self._scheduler.get_job(_job_id(user_id))
        return job.next_run_time if job is not None else None

    def _on_job_error(self, event: JobExecutionEvent) -> None:
        self._logger.error(
            "Offline job failed", extra={"reason": event.job_id, "error": str(event.exception)}
        )
