"""
Settings Configuration
Pydantic-validated settings, loaded from the environment and an optional .env file
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from utils.exceptions import ConfigurationError


DEFAULT_BASE_URL = "https://www.lakemacquarierowingclub.org.au"


def _parse_hhmm(value: str) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    text = str(value or "").strip()
    hour_text, sep, minute_text = text.partition(":")
    if not sep or not hour_text.isdigit() or not minute_text.isdigit():
        raise ValueError(f"expected HH:MM, got {value!r}")
    hour, minute = int(hour_text), int(minute_text)
    if hour > 24 or minute > 59 or (hour == 24 and minute != 0):
        raise ValueError(f"time out of range: {value!r}")
    return hour * 60 + minute


class ScheduleWindow(BaseModel):
    """A daily time window with its own minimum interval between runs"""
    model_config = ConfigDict(populate_by_name=True)

    start: str = Field(..., description="Window start, HH:MM local time")
    end: str = Field(..., description="Window end, HH:MM local time")
    interval_minutes: int = Field(default=60, ge=1, alias="intervalMinutes")

    @field_validator("start", "end")
    @classmethod
    def _check_time(cls, value: str) -> str:
        _parse_hhmm(value)
        return value.strip()

    @property
    def start_minute(self) -> int:
        return _parse_hhmm(self.start)

    @property
    def end_minute(self) -> int:
        return _parse_hhmm(self.end)


class SiteSettings(BaseSettings):
    """Target site and per-section paths"""
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Site root URL")
    gallery_path: str = Field(default="/gallery", description="Album listing page")
    events_path: str = Field(default="/events/list", description="Event listing page")
    news_path: str = Field(default="/news", description="News listing page")
    sponsors_path: str = Field(default="/home", description="Page carrying the sponsor carousel")

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return str(value or "").strip().rstrip("/")

    def url_for(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    class Config:
        env_prefix = "SITE_"


class ScraperSettings(BaseSettings):
    """Fetching, fan-out and throttling"""
    request_timeout: float = Field(default=30.0, description="Per-request timeout (seconds)")
    max_retries: int = Field(default=3, ge=1, description="Full-run attempts")
    retry_delay: float = Field(default=10.0, ge=0, description="Backoff between attempts (seconds)")
    album_limit: int = Field(default=10, ge=0, description="Albums visited for photos")
    max_photos_per_album: int = Field(default=30, ge=1, description="Photo cap per album")
    news_limit: int = Field(default=20, ge=0, description="Articles visited for full content")
    min_content_length: int = Field(default=100, ge=0, description="Minimum article text to accept a container")
    throttle_min: float = Field(default=2.0, ge=0, description="Minimum pause between sections (seconds)")
    throttle_max: float = Field(default=5.0, ge=0, description="Maximum pause between sections (seconds)")
    article_pause: float = Field(default=0.5, ge=0, description="Pause between article detail fetches (seconds)")
    debug_dir: str = Field(default="./debug", description="Where challenge pages are dumped")

    @model_validator(mode="after")
    def _check_throttle(self) -> "ScraperSettings":
        if self.throttle_max < self.throttle_min:
            raise ValueError("throttle_max must be >= throttle_min")
        return self

    class Config:
        env_prefix = "SCRAPER_"


class ScheduleSettings(BaseSettings):
    """Run windows for the scheduled entry point"""
    enabled: bool = Field(default=False, description="Restrict runs to the configured windows")
    windows: List[ScheduleWindow] = Field(default_factory=list, description="JSON list of windows")
    state_file: str = Field(default="./data/last-run.json", description="Sidecar holding the last run time")
    poll_seconds: int = Field(default=60, ge=1, description="Scheduler loop tick while windows are enabled")
    interval_minutes: int = Field(default=60, ge=1, description="Run interval while windows are disabled")

    class Config:
        env_prefix = "SCHEDULE_"


class StorageSettings(BaseSettings):
    """Snapshot storage"""
    data_dir: str = Field(default="./data", description="Snapshot directory")
    stale_minutes: int = Field(default=120, description="Age after which a snapshot is stale")
    unhealthy_minutes: int = Field(default=240, description="Age after which health fails")

    class Config:
        env_prefix = "STORAGE_"


class Settings(BaseSettings):
    """Top-level settings, aggregating every group"""

    site: SiteSettings = Field(default_factory=SiteSettings)
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading ``config/.env`` first when it exists."""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            site=SiteSettings(),
            scraper=ScraperSettings(),
            schedule=ScheduleSettings(),
            storage=StorageSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings for entry points; library code takes Settings explicitly.

    Raises:
        ConfigurationError: an environment value failed validation
    """
    try:
        return Settings.load_from_env_file()
    except ValidationError as e:
        raise ConfigurationError("Invalid configuration", {"error": str(e)}) from e
