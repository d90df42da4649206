from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from config import ScheduleSettings, ScraperSettings, Settings, SiteSettings, StorageSettings
from utils.exceptions import FetchError


BASE_URL = "https://club.example.org"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        site=SiteSettings(base_url=BASE_URL),
        scraper=ScraperSettings(
            retry_delay=0,
            throttle_min=0,
            throttle_max=0,
            article_pause=0,
            debug_dir=str(tmp_path / "debug"),
        ),
        schedule=ScheduleSettings(state_file=str(tmp_path / "data" / "last-run.json")),
        storage=StorageSettings(data_dir=str(tmp_path / "data")),
    )


class FakeFetcher:
    """Serves canned pages by URL; anything else is a 404."""

    def __init__(self, pages: Dict[str, object]):
        self.pages = pages
        self.requested = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise FetchError(f"HTTP 404 for {url}", url=url, status=404)
        return page

    async def close(self) -> None:
        pass


@pytest.fixture
def make_fetcher():
    return FakeFetcher
