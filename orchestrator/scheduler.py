"""Scheduler control surface: running guard, forced runs and status."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
import logging
from threading import Lock
from typing import Any, Awaitable, Callable, Dict, Optional

from config import Settings
from models import utcnow
from storage import SnapshotStore
from .retry import RunResult, run_with_retry
from .schedule import ScheduleGate
from .service import RunReport, SectionOrchestrator


logger = logging.getLogger(__name__)

RunFactory = Callable[[], Awaitable[RunReport]]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="seconds") if value else None


class ScraperScheduler:
    """
    Serializes pipeline runs.

    A request arriving while a run is in flight returns an "already running"
    result instead of queueing. ``force=True`` bypasses the schedule gate.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        store: Optional[SnapshotStore] = None,
        gate: Optional[ScheduleGate] = None,
        run_factory: Optional[RunFactory] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.store = store or SnapshotStore(
            settings.storage.data_dir,
            stale_minutes=settings.storage.stale_minutes,
            unhealthy_minutes=settings.storage.unhealthy_minutes,
        )
        self.gate = gate or ScheduleGate.from_settings(settings.schedule)
        self._run_factory = run_factory or self._run_once
        self._sleep = sleep
        self._lock = Lock()
        self.is_running = False
        self.last_run: Optional[datetime] = None
        self.last_result: Optional[RunResult] = None
        self.run_count = 0

    async def _run_once(self) -> RunReport:
        orchestrator = SectionOrchestrator(self.settings, store=self.store)
        return await orchestrator.run()

    async def run_scraper(self, force: bool = False) -> RunResult:
        with self._lock:
            if self.is_running:
                logger.info("Scraper already running, skipping")
                return RunResult(success=False, message="Scraper already running")
            if not force and not self.gate.should_run_now():
                return RunResult(success=False, skipped=True, message="Outside schedule window")
            self.is_running = True
            self.last_run = utcnow()
            self.run_count += 1

        logger.info("Starting scraper run #%d%s", self.run_count, " (forced)" if force else "")
        try:
            result = await run_with_retry(
                self._run_factory,
                max_attempts=self.settings.scraper.max_retries,
                backoff_seconds=self.settings.scraper.retry_delay,
                sleep=self._sleep,
            )
            try:
                self.gate.record_run(self.last_run)
            except OSError as e:
                logger.error("Could not record last run in %s: %s", self.gate.state_path, e)
        finally:
            with self._lock:
                self.is_running = False

        self.last_result = result
        if result.success:
            logger.info("Scraper run #%d completed", self.run_count)
        else:
            logger.error("Scraper run #%d failed: %s", self.run_count, result.error)
        return result

    def next_run(self, now: Optional[datetime] = None) -> Optional[datetime]:
        if self.gate.enabled:
            return self.gate.next_run(now)
        if self.last_run is None:
            return None
        return self.last_run + timedelta(seconds=self.tick_seconds)

    @property
    def tick_seconds(self) -> int:
        if self.gate.enabled:
            return self.settings.schedule.poll_seconds
        return self.settings.schedule.interval_minutes * 60

    def get_status(self) -> Dict[str, Any]:
        return {
            "isRunning": self.is_running,
            "lastRun": _iso(self.last_run),
            "lastResult": self.last_result.to_status() if self.last_result else None,
            "nextRun": _iso(self.next_run()),
            "runCount": self.run_count,
            "scheduleEnabled": self.gate.enabled,
        }

    async def run_forever(self, stop: Optional[asyncio.Event] = None) -> None:
        """Run on every tick; with windows enabled the gate decides whether a tick runs."""
        tick = self.tick_seconds
        logger.info("Scheduler loop started (tick %ss, windows %s)", tick, "on" if self.gate.enabled else "off")
        while stop is None or not stop.is_set():
            result = await self.run_scraper()
            if result.message and not result.success:
                logger.debug(result.message)
            await self._sleep(tick)
