"""
Events Scraper
Event cards from the events listing page
"""
import logging
import re
from typing import List, Optional

from bs4 import Tag

from models import Event, Section, SectionEnvelope
from processing import absolutize_url, clean_text, dedupe, text_lines
from .base import BaseScraper, parse_html


logger = logging.getLogger(__name__)

EVENTS_MARKER = "/events/"
EVENT_URL_PATTERN = re.compile(r"/events/(\d+)")

# "Sat 26 Oct 2025 08:00 — 17:00" or "Sat 15 Nov 2025 09:00 — Sun 16 Nov 2025 16:00"
_DAY_MONTH_YEAR = r"\d{1,2}\s+[A-Z][a-z]{2,8}\s+\d{4}"
EVENT_DATE_PATTERN = re.compile(
    rf"[A-Z][a-z]{{2}}\s+{_DAY_MONTH_YEAR}\s+\d{{1,2}}:\d{{2}}"
    rf"(?:\s*[—–-]\s*(?:(?:[A-Z][a-z]{{2}}\s+)?{_DAY_MONTH_YEAR}\s+)?\d{{1,2}}:\d{{2}})?"
)

NOISE_WORDS = ("Download", "Past", "Calendar")
MAX_LOCATION_LENGTH = 100


def extract_date_text(text: str) -> str:
    match = EVENT_DATE_PATTERN.search(text or "")
    if not match:
        return ""
    return " ".join(match.group(0).split())


def extract_location(lines: List[str], title: str, date_text: str) -> str:
    """
    First line that is not the title, does not contain the date and is not "Details".

    Positional heuristic: an extra announcement line above the venue is taken as the
    location. An empty date_text is contained in every line, so no date means no location.
    """
    for line in lines:
        if line == title or date_text in " ".join(line.split()) or line == "Details":
            continue
        if len(line) < MAX_LOCATION_LENGTH:
            return line
    return ""


def is_valid_event(title: str, url: str) -> bool:
    if not title or len(title) <= 5:
        return False
    if any(word in title for word in NOISE_WORDS):
        return False
    return EVENT_URL_PATTERN.search(url or "") is not None


def parse_event_card(card: Tag, base_url: str) -> Optional[Event]:
    link = card.select_one(f'a[href*="{EVENTS_MARKER}"]')
    if link is None:
        return None

    title = clean_text(link.get_text())
    url = absolutize_url(link.get("href"), base_url)
    card_text = card.get_text()
    date_text = extract_date_text(card_text)
    location = extract_location(text_lines(card_text), title, date_text)

    if not is_valid_event(title, url):
        return None
    event_id = EVENT_URL_PATTERN.search(url).group(1)
    return Event(title=title, date_text=date_text, location=location, url=url, event_id=event_id)


def extract_events(html: str, base_url: str) -> List[Event]:
    soup = parse_html(html)
    events = []
    for card in soup.select(".card.card-hover"):
        event = parse_event_card(card, base_url)
        if event is not None:
            events.append(event)
    return dedupe(events, lambda event: event.event_id)


class EventsScraper(BaseScraper):
    """Upcoming events"""

    @property
    def section(self) -> Section:
        return Section.EVENTS

    @property
    def listing_path(self) -> str:
        return self.settings.site.events_path

    async def scrape(self) -> SectionEnvelope:
        html = await self.fetcher.fetch(self.listing_url)
        events = extract_events(html, self.base_url)
        self._log_found("events", len(events))
        return SectionEnvelope(section=self.section, items=events, total_count=len(events))
