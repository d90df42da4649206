"""Section orchestrator: one sequential pass over every section."""

from __future__ import annotations

import asyncio
from datetime import datetime
from enum import Enum
import logging
import random
from typing import Awaitable, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from pydantic import BaseModel, Field

from config import Settings
from models import Section, SectionEnvelope, utcnow
from scrapers import SECTION_SCRAPERS, BaseScraper, PageFetcher
from storage import SnapshotStore
from utils.exceptions import RunFailure, SectionFailure


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class SectionSummary(BaseModel):
    items: int = 0
    total: int = 0
    error: Optional[str] = None


class RunReport(BaseModel):
    """Outcome of one orchestrator pass."""

    run_id: str
    state: RunState
    started_at: datetime
    finished_at: Optional[datetime] = None
    sections: Dict[str, SectionSummary] = Field(default_factory=dict)
    error: Optional[str] = None

    @property
    def section_errors(self) -> Dict[str, str]:
        return {name: s.error for name, s in self.sections.items() if s.error}


def _new_run_id() -> str:
    return f"run_{utcnow().strftime('%Y%m%d_%H%M%S')}_{uuid4().hex[:8]}"


class SectionOrchestrator:
    """
    Runs gallery, events, news and sponsors in order, saving each envelope.

    A section failure is recorded in that section's envelope. Anything else that
    escapes (for example a storage error) fails the run with RunFailure.
    The orchestrator does not lock; callers serialize runs.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        store: Optional[SnapshotStore] = None,
        fetcher: Optional[PageFetcher] = None,
        scraper_types: Sequence[type] = SECTION_SCRAPERS,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.store = store or SnapshotStore(
            settings.storage.data_dir,
            stale_minutes=settings.storage.stale_minutes,
            unhealthy_minutes=settings.storage.unhealthy_minutes,
        )
        self._fetcher = fetcher
        self._scraper_types = list(scraper_types)
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    async def run(self) -> RunReport:
        report = RunReport(run_id=_new_run_id(), state=RunState.RUNNING, started_at=utcnow())
        self._state = RunState.RUNNING
        logger.info("Run %s started", report.run_id)

        fetcher = self._fetcher or PageFetcher(self.settings)
        try:
            envelopes = await self._run_sections(fetcher, report)
        except Exception as exc:
            self._state = RunState.FAILED
            report.state = RunState.FAILED
            report.error = str(exc)
            report.finished_at = utcnow()
            logger.error("Run %s failed: %s", report.run_id, exc)
            raise RunFailure(f"Run {report.run_id} failed: {exc}", {"run_id": report.run_id}) from exc
        finally:
            if self._fetcher is None:
                await fetcher.close()

        self._state = RunState.COMPLETED
        report.state = RunState.COMPLETED
        report.finished_at = utcnow()
        self._log_summary(report, envelopes)
        return report

    async def _run_sections(self, fetcher: PageFetcher, report: RunReport) -> List[SectionEnvelope]:
        scrapers: List[BaseScraper] = [cls(self.settings, fetcher) for cls in self._scraper_types]
        envelopes = []
        for index, scraper in enumerate(scrapers):
            if index > 0:
                await self._throttle()
            envelope = await self._run_section(scraper)
            self.store.save(envelope.section, envelope)
            report.sections[envelope.section.value] = SectionSummary(
                items=len(envelope.items),
                total=envelope.total_count,
                error=envelope.error,
            )
            envelopes.append(envelope)
        return envelopes

    async def _run_section(self, scraper: BaseScraper) -> SectionEnvelope:
        try:
            return await scraper.run()
        except SectionFailure as exc:
            logger.error("[%s] recorded as failed: %s", scraper.name, exc.message)
            return SectionEnvelope.failed(scraper.section, exc.message)

    async def _throttle(self) -> None:
        low = self.settings.scraper.throttle_min
        high = self.settings.scraper.throttle_max
        delay = self._rng.uniform(low, high) if high > 0 else 0.0
        if delay > 0:
            logger.debug("Waiting %.1fs before next section", delay)
            await self._sleep(delay)

    @staticmethod
    def _log_summary(report: RunReport, envelopes: List[SectionEnvelope]) -> None:
        by_section = {env.section: env for env in envelopes}
        gallery = by_section.get(Section.GALLERY)
        photos = sum(album.photo_count or 0 for album in gallery.items) if gallery else 0
        logger.info(
            "Run %s completed: albums=%d photos=%d events=%d news=%d sponsors=%d errors=%d",
            report.run_id,
            report.sections.get("gallery", SectionSummary()).items,
            photos,
            report.sections.get("events", SectionSummary()).items,
            report.sections.get("news", SectionSummary()).items,
            report.sections.get("sponsors", SectionSummary()).items,
            len(report.section_errors),
        )
