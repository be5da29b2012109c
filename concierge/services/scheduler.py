from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config import get_settings
from .checkout_reminders import send_checkout_reminders

settings = get_settings()
log = logging.getLogger(__name__)

CHECKOUT_REMINDER_JOB_ID = "checkout_reminders"


class ReminderScheduler:
    """Owns the periodic checkout reminder sweep.

    ``start()`` runs the sweep immediately and then every
    ``interval_minutes``; ``stop()`` shuts it down. ``run_once()`` lets
    callers (and tests) trigger a single sweep without waiting on the clock.
    At most one sweep runs at a time: a tick that lands while a slow sweep is
    still working is skipped, not queued.
    """

    def __init__(
        self,
        sweep: Callable[[], Awaitable[int]] = send_checkout_reminders,
        interval_minutes: float | None = None,
        timezone: str | None = None,
    ):
        self._sweep = sweep
        self.interval_minutes = interval_minutes or settings.CHECKOUT_REMINDER_INTERVAL_MINUTES
        self.timezone = pytz.timezone(timezone or settings.TIMEZONE)
        self._scheduler: AsyncIOScheduler | None = None
        self._sweep_in_progress = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def sweep_in_progress(self) -> bool:
        return self._sweep_in_progress.locked()

    async def run_once(self) -> int | None:
        """Run one sweep now. Returns its reminder count, or None if a sweep was already running."""
        if self._sweep_in_progress.locked():
            log.warning("[Scheduler] Previous checkout reminder sweep still running, skipping this tick")
            return None

        async with self._sweep_in_progress:
            return await self._sweep()

    def start(self) -> None:
        if self.running:
            return

        self._scheduler = AsyncIOScheduler(timezone=self.timezone)
        self._scheduler.add_job(
            self.run_once,
            IntervalTrigger(minutes=self.interval_minutes, timezone=self.timezone),
            id=CHECKOUT_REMINDER_JOB_ID,
            name="Send checkout reminders",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(self.timezone),  # first sweep at startup
        )
        self._scheduler.start()
        log.info(f"[Scheduler] Checkout reminder sweep started (every {self.interval_minutes} minutes)")

    def stop(self) -> None:
        if not self.running:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        log.info("[Scheduler] Checkout reminder sweep stopped")
