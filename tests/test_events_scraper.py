"""
Tests for event card extraction
"""
from __future__ import annotations

import pytest

from scrapers.events_scraper import (
    EventsScraper,
    extract_date_text,
    extract_events,
    extract_location,
    is_valid_event,
)


BASE_URL = "https://club.example.org"


def _card(title: str, href: str, *lines: str) -> str:
    body = "\n".join(f"<div>{line}</div>" for line in lines)
    return f"""
    <div class="card card-hover">
      <div class="card-body">
        <h3><a href="{href}">{title}</a></h3>
        {body}
        <a class="btn" href="{href}">Details</a>
      </div>
    </div>
    """


def _page(*cards: str) -> str:
    return "<html><body><a href='/events/past'>Past Events</a>" + "".join(cards) + "</body></html>"


class TestDateText:

    def test_same_day_range(self):
        text = "Summer Regatta\nSat 26 Oct 2025 08:00 — 17:00\nLake Macquarie\nDetails"
        assert extract_date_text(text) == "Sat 26 Oct 2025 08:00 — 17:00"

    def test_multi_day_range(self):
        date = extract_date_text("Sat 15 Nov 2025 09:00 — Sun 16 Nov 2025 16:00")
        assert "Sat 15 Nov 2025" in date
        assert "Sun 16 Nov 2025" in date
        assert date == "Sat 15 Nov 2025 09:00 — Sun 16 Nov 2025 16:00"

    def test_start_only(self):
        assert extract_date_text("Club BBQ Fri 7 November 2025 18:30 at the shed") == "Fri 7 November 2025 18:30"

    def test_no_date(self):
        assert extract_date_text("Annual General Meeting\nClubhouse") == ""
        assert extract_date_text("") == ""


class TestLocation:

    def test_skips_title_date_and_details(self):
        lines = ["Summer Regatta", "Sat 26 Oct 2025 08:00 — 17:00", "Details", "Lake Macquarie Rowing Club"]
        assert extract_location(lines, "Summer Regatta", "Sat 26 Oct 2025 08:00 — 17:00") == "Lake Macquarie Rowing Club"

    def test_announcement_line_is_taken_as_location(self):
        # Positional heuristic: whatever line comes first wins
        lines = ["Summer Regatta", "Sat 26 Oct 2025 08:00 — 17:00", "Entries close Friday", "Boatshed"]
        assert extract_location(lines, "Summer Regatta", "Sat 26 Oct 2025 08:00 — 17:00") == "Entries close Friday"

    def test_no_date_means_no_location(self):
        assert extract_location(["Summer Regatta", "Boatshed"], "Summer Regatta", "") == ""


class TestValidity:

    def test_title_must_exceed_five_chars(self):
        assert not is_valid_event("short", "/events/123")
        assert is_valid_event("shorts", "/events/123")

    def test_noise_words(self):
        assert not is_valid_event("Download Calendar", "/events/123")
        assert not is_valid_event("Past Events List", "/events/123")

    def test_url_must_have_numeric_id(self):
        assert not is_valid_event("Summer Regatta", "/events/list")
        assert not is_valid_event("Summer Regatta", "/news/123")


class TestExtractEvents:

    def test_summer_regatta_card(self):
        html = _page(_card("Summer Regatta", "/events/4821", "Sat 26 Oct 2025 08:00 — 17:00", "Lake Macquarie Rowing Club"))
        events = extract_events(html, BASE_URL)
        assert len(events) == 1
        event = events[0]
        assert event.title == "Summer Regatta"
        assert event.date_text == "Sat 26 Oct 2025 08:00 — 17:00"
        assert event.location == "Lake Macquarie Rowing Club"
        assert event.url == f"{BASE_URL}/events/4821"
        assert event.event_id == "4821"
        assert event.kind == "event"

    def test_wire_names(self):
        html = _page(_card("Summer Regatta", "/events/4821", "Sat 26 Oct 2025 08:00 — 17:00", "Boatshed"))
        wire = extract_events(html, BASE_URL)[0].to_wire()
        assert wire["dateText"] == "Sat 26 Oct 2025 08:00 — 17:00"
        assert wire["eventId"] == "4821"

    def test_card_without_date(self):
        html = _page(_card("Annual General Meeting", "/events/77", "Clubhouse"))
        event = extract_events(html, BASE_URL)[0]
        assert event.date_text == ""
        assert event.location == ""

    def test_rejections_and_dedupe(self):
        html = _page(
            _card("short", "/events/1", "Sat 26 Oct 2025 08:00 — 17:00"),
            _card("Download Calendar", "/events/2"),
            _card("Club Championships", "/events/list"),
            _card("Club Championships", "/events/3", "Sat 15 Nov 2025 09:00 — Sun 16 Nov 2025 16:00", "Speers Point"),
            _card("Club Championships again", "/events/3"),
            '<div class="card card-hover"><p>No link in this card</p></div>',
        )
        events = extract_events(html, BASE_URL)
        assert [e.event_id for e in events] == ["3"]
        assert events[0].location == "Speers Point"

    @pytest.mark.asyncio
    async def test_scraper_envelope(self, settings, make_fetcher):
        html = _page(_card("Summer Regatta", "/events/4821", "Sat 26 Oct 2025 08:00 — 17:00", "Boatshed"))
        fetcher = make_fetcher({f"{BASE_URL}/events/list": html})
        envelope = await EventsScraper(settings, fetcher).run()
        snapshot = envelope.to_snapshot()
        assert snapshot["totalEvents"] == 1
        assert snapshot["events"][0]["title"] == "Summer Regatta"
