"""
Base Scraper
Abstract base for the four section scrapers
"""
from abc import ABC, abstractmethod
import asyncio
import logging

from bs4 import BeautifulSoup

from config import Settings
from models import Section, SectionEnvelope
from utils.exceptions import SectionFailure
from .fetcher import PageFetcher


logger = logging.getLogger(__name__)


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


class BaseScraper(ABC):
    """
    Section scraper base.
    Subclasses fetch their listing page, run the extractor and any detail fan-out.
    """

    def __init__(self, settings: Settings, fetcher: PageFetcher):
        self.settings = settings
        self.fetcher = fetcher

    @property
    @abstractmethod
    def section(self) -> Section:
        """Section this scraper fills"""
        pass

    @property
    @abstractmethod
    def listing_path(self) -> str:
        """Path of the listing page, relative to the site root"""
        pass

    @abstractmethod
    async def scrape(self) -> SectionEnvelope:
        """
        Build this section's envelope.

        Network errors on the listing page propagate; per-item errors are
        handled inside.
        """
        pass

    @property
    def name(self) -> str:
        return self.section.value.capitalize()

    @property
    def base_url(self) -> str:
        return self.settings.site.base_url

    @property
    def listing_url(self) -> str:
        return self.settings.site.url_for(self.listing_path)

    async def run(self) -> SectionEnvelope:
        """Scrape, turning any failure into SectionFailure."""
        logger.info(f"[{self.name}] Scraping {self.listing_url}")
        try:
            return await self.scrape()
        except SectionFailure:
            raise
        except Exception as e:
            self._log_error("Section failed", e)
            raise SectionFailure(str(e), section=self.section.value) from e

    async def _pause(self, seconds: float):
        if seconds > 0:
            await asyncio.sleep(seconds)

    def _log_found(self, what: str, count: int):
        logger.info(f"[{self.name}] Found {count} {what}")

    def _log_error(self, message: str, error: Exception):
        logger.error(f"[{self.name}] {message}: {error}")
