"""FastAPI app serving section snapshots and the scraper control surface."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from models import SECTION_KEYS, Section
from orchestrator.scheduler import ScraperScheduler
from storage import SnapshotStore
from webapp.runtime import get_scheduler, get_store


logger = logging.getLogger(__name__)

app = FastAPI(title="Club Noticeboard API")


def _section_response(section: Section, store: SnapshotStore) -> JSONResponse:
    data = store.load(section)
    items_key, _ = SECTION_KEYS[section]
    if data is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": f"{section.value.capitalize()} data not available",
                items_key: [],
                "message": "Waiting for first scrape...",
            },
        )
    data["dataAge"] = store.data_age(section)
    return JSONResponse(content=data)


@app.get("/api/gallery")
def get_gallery(store: SnapshotStore = Depends(get_store)) -> JSONResponse:
    return _section_response(Section.GALLERY, store)


@app.get("/api/events")
def get_events(store: SnapshotStore = Depends(get_store)) -> JSONResponse:
    return _section_response(Section.EVENTS, store)


@app.get("/api/news")
def get_news(store: SnapshotStore = Depends(get_store)) -> JSONResponse:
    return _section_response(Section.NEWS, store)


@app.get("/api/sponsors")
def get_sponsors(store: SnapshotStore = Depends(get_store)) -> JSONResponse:
    return _section_response(Section.SPONSORS, store)


@app.get("/api/health")
def health(store: SnapshotStore = Depends(get_store)) -> JSONResponse:
    report = store.health()
    content = {
        "server": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "dataFiles": report["dataFiles"],
    }
    return JSONResponse(status_code=200 if report["healthy"] else 503, content=content)


@app.post("/api/scraper/run")
async def trigger_run(force: bool = False, scheduler: ScraperScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    # A failed run comes back as a result object; it never propagates to the server
    result = await scheduler.run_scraper(force=force)
    return result.to_status()


@app.get("/api/scraper/status")
def scraper_status(scheduler: ScraperScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    return scheduler.get_status()
