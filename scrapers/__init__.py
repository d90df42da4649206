"""
Scrapers Module
"""
from .fetcher import PageFetcher, is_challenge_page
from .base import BaseScraper, parse_html
from .gallery_scraper import GalleryScraper, extract_albums, extract_photos, parse_background_image
from .events_scraper import EventsScraper, extract_events, extract_date_text, extract_location
from .news_scraper import NewsScraper, extract_news, extract_article_content, news_kind
from .sponsors_scraper import SponsorsScraper, extract_sponsors, resolve_image_source

SECTION_SCRAPERS = (GalleryScraper, EventsScraper, NewsScraper, SponsorsScraper)

__all__ = [
    # Fetching
    "PageFetcher",
    "is_challenge_page",
    # Base
    "BaseScraper",
    "parse_html",
    "SECTION_SCRAPERS",
    # Gallery
    "GalleryScraper",
    "extract_albums",
    "extract_photos",
    "parse_background_image",
    # Events
    "EventsScraper",
    "extract_events",
    "extract_date_text",
    "extract_location",
    # News
    "NewsScraper",
    "extract_news",
    "extract_article_content",
    "news_kind",
    # Sponsors
    "SponsorsScraper",
    "extract_sponsors",
    "resolve_image_source",
]
