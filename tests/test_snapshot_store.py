"""
Tests for snapshot persistence, backups and age tracking
"""
from __future__ import annotations

import json
import math
import time

import pytest

from models import Event, Section, SectionEnvelope
from storage import SnapshotStore
from utils.exceptions import StorageError


def _events(*titles: str) -> SectionEnvelope:
    items = [
        Event(title=title, url=f"https://club.example.org/events/{i}", event_id=str(i))
        for i, title in enumerate(titles, start=1)
    ]
    return SectionEnvelope(section=Section.EVENTS, items=items, total_count=len(items))


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / "data")


def test_first_save_has_no_backup(store):
    path = store.save(Section.EVENTS, _events("Summer Regatta"))
    assert path.name == "events-data.json"
    assert path.exists()
    assert not store.backup_path(path).exists()


def test_second_save_keeps_previous_as_backup(store):
    store.save(Section.EVENTS, _events("Summer Regatta"))
    path = store.save(Section.EVENTS, _events("Masters Camp", "Learn to Row"))

    current = json.loads(path.read_text(encoding="utf-8"))
    backup = json.loads(store.backup_path(path).read_text(encoding="utf-8"))
    assert [e["title"] for e in current["events"]] == ["Masters Camp", "Learn to Row"]
    assert current["totalEvents"] == 2
    assert [e["title"] for e in backup["events"]] == ["Summer Regatta"]


def test_no_temp_files_left(store):
    store.save(Section.EVENTS, _events("Summer Regatta"))
    store.save(Section.EVENTS, _events("Masters Camp"))
    assert sorted(p.name for p in store.data_dir.iterdir()) == ["events-data.json", "events-data.json.backup"]


def test_load(store):
    assert store.load(Section.NEWS) is None
    store.save("custom.json", {"hello": "world"})
    assert store.load("custom.json") == {"hello": "world"}


def test_load_corrupt_file(store):
    store.data_dir.mkdir(parents=True)
    store.path_for(Section.GALLERY).write_text("{not json", encoding="utf-8")
    assert store.load(Section.GALLERY) is None


def test_unserializable_payload(store):
    with pytest.raises(StorageError):
        store.save("bad.json", {"value": object()})
    assert not store.path_for("bad.json").exists()


def test_age(store):
    assert store.age(Section.SPONSORS) == math.inf
    store.save(Section.SPONSORS, SectionEnvelope(section=Section.SPONSORS))
    assert store.age(Section.SPONSORS) < 60


def test_data_age(store):
    assert store.data_age(Section.EVENTS) == {"minutes": None, "stale": True}

    store.save(Section.EVENTS, _events("Summer Regatta"))
    assert store.data_age(Section.EVENTS) == {"minutes": 0, "stale": False}

    later = time.time() + 121 * 60
    age = store.data_age(Section.EVENTS, now=later)
    assert age["stale"] is True
    assert age["minutes"] in (121, 122)


def test_health(store):
    report = store.health()
    assert report["healthy"] is False
    assert report["dataFiles"]["gallery"] == {"exists": False, "ageMinutes": None, "stale": True}

    for section in Section:
        store.save(section, SectionEnvelope(section=section))
    assert store.health()["healthy"] is True

    # stale but not yet unhealthy
    assert store.health(now=time.time() + 200 * 60)["healthy"] is True
    assert store.health(now=time.time() + 241 * 60)["healthy"] is False
