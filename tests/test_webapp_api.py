"""Tests for the snapshot and scraper-control HTTP API."""

from __future__ import annotations

import importlib
from pathlib import Path

from fastapi.testclient import TestClient
import pytest

from models import Album, Event, Photo, Section, SectionEnvelope, utcnow
from orchestrator import RunReport, RunState, ScraperScheduler
from storage import SnapshotStore

webapp_module = importlib.import_module("webapp.app")
runtime_module = importlib.import_module("webapp.runtime")


class ClosedGate:
    enabled = True

    def should_run_now(self, now=None) -> bool:
        return False

    def record_run(self, when=None) -> None:
        pass

    def next_run(self, now=None):
        return None


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / "data")


@pytest.fixture
def scheduler(settings, store):
    async def _fake_run():
        return RunReport(run_id="run_api", state=RunState.COMPLETED, started_at=utcnow())

    return ScraperScheduler(settings, store=store, gate=ClosedGate(), run_factory=_fake_run, sleep=_no_sleep)


@pytest.fixture
def client(store, scheduler):
    app = webapp_module.app
    app.dependency_overrides[runtime_module.get_store] = lambda: store
    app.dependency_overrides[runtime_module.get_scheduler] = lambda: scheduler
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_missing_snapshot_returns_404(client):
    response = client.get("/api/events")
    assert response.status_code == 404
    payload = response.json()
    assert payload["events"] == []
    assert payload["message"] == "Waiting for first scrape..."
    assert "error" in payload


def test_snapshot_with_data_age(client, store):
    photo = Photo(url="https://x.org/1.jpg", thumbnail_url="https://x.org/t1.jpg")
    album = Album(title="Regatta Day", url="https://x.org/gallery/regatta", album_id="regatta").with_photos([photo])
    store.save(Section.GALLERY, SectionEnvelope(section=Section.GALLERY, items=[album], total_count=4))

    response = client.get("/api/gallery")
    assert response.status_code == 200
    payload = response.json()
    assert payload["totalAlbums"] == 4
    assert payload["albums"][0]["photos"][0]["thumbnailUrl"] == "https://x.org/t1.jpg"
    assert payload["dataAge"] == {"minutes": 0, "stale": False}


def test_every_section_route(client, store):
    event = Event(title="Learn to Row", url="https://x.org/events/9", event_id="9")
    store.save(Section.EVENTS, SectionEnvelope(section=Section.EVENTS, items=[event], total_count=1))
    store.save(Section.NEWS, SectionEnvelope(section=Section.NEWS))
    store.save(Section.SPONSORS, SectionEnvelope(section=Section.SPONSORS))

    assert client.get("/api/events").json()["events"][0]["eventId"] == "9"
    assert client.get("/api/news").json()["totalArticles"] == 0
    assert client.get("/api/sponsors").json()["sponsors"] == []
    assert client.get("/api/gallery").status_code == 404


def test_health(client, store):
    response = client.get("/api/health")
    assert response.status_code == 503
    assert response.json()["dataFiles"]["news"]["exists"] is False

    for section in Section:
        store.save(section, SectionEnvelope(section=section))
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["server"] == "running"


def test_run_respects_schedule_unless_forced(client):
    skipped = client.post("/api/scraper/run").json()
    assert skipped["success"] is False
    assert skipped["skipped"] is True

    forced = client.post("/api/scraper/run", params={"force": "true"}).json()
    assert forced["success"] is True
    assert forced["report"]["run_id"] == "run_api"


def test_status(client):
    client.post("/api/scraper/run", params={"force": "true"})
    status = client.get("/api/scraper/status").json()
    assert status["runCount"] == 1
    assert status["isRunning"] is False
    assert status["scheduleEnabled"] is True
    assert status["lastResult"]["success"] is True


def test_configure_builds_runtime_from_settings(settings):
    runtime_module.configure(settings)
    store = runtime_module.get_store()
    scheduler = runtime_module.get_scheduler()
    assert store.data_dir == Path(settings.storage.data_dir)
    assert scheduler.store is store
    assert scheduler.settings is settings
