"""Shared runtime singletons for web/CLI entrypoints."""

from __future__ import annotations

from typing import Optional

from config import Settings, get_settings
from orchestrator.scheduler import ScraperScheduler
from storage import SnapshotStore


_STORE: Optional[SnapshotStore] = None
_SCHEDULER: Optional[ScraperScheduler] = None


def _build(settings: Settings) -> None:
    global _STORE, _SCHEDULER
    _STORE = SnapshotStore(
        settings.storage.data_dir,
        stale_minutes=settings.storage.stale_minutes,
        unhealthy_minutes=settings.storage.unhealthy_minutes,
    )
    _SCHEDULER = ScraperScheduler(settings, store=_STORE)


def configure(settings: Settings) -> None:
    """Rebuild the singletons from explicit settings."""
    _build(settings)


def get_store() -> SnapshotStore:
    if _STORE is None:
        _build(get_settings())
    return _STORE


def get_scheduler() -> ScraperScheduler:
    if _SCHEDULER is None:
        _build(get_settings())
    return _SCHEDULER
