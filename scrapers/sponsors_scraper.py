"""
Sponsors Scraper
Sponsor logos from the page carrying the sponsor carousel
"""
import logging
from typing import List, Optional

from bs4 import Tag

from models import Section, SectionEnvelope, Sponsor
from processing import Strategy, absolutize_url, clean_text, dedupe, first_match
from .base import BaseScraper, parse_html


logger = logging.getLogger(__name__)

SPONSOR_LINK_MARKER = "/sponsor/"
SPONSOR_IMAGE_MARKER = "/sponsors/"
DEFAULT_SPONSOR_NAME = "Sponsor"

STANDALONE_IMAGE_SELECTORS = (
    f'img[src*="{SPONSOR_IMAGE_MARKER}"]',
    f'img[data-src*="{SPONSOR_IMAGE_MARKER}"]',
    'img[alt*="Sponsor"]',
    'div[class*="sponsor"] img',
)


def _attr(name: str):
    def read(img: Tag) -> Optional[str]:
        value = str(img.get(name) or "").strip()
        # Lazy-load placeholders are inline data URIs
        if not value or value.startswith("data:"):
            return None
        return value
    return read


def _first_srcset_entry(img: Tag) -> Optional[str]:
    srcset = str(img.get("srcset") or "").strip()
    if not srcset:
        return None
    return srcset.split(",")[0].strip().split(" ")[0] or None


IMAGE_SOURCE_STRATEGIES = [
    Strategy("src", _attr("src")),
    Strategy("data-src", _attr("data-src")),
    Strategy("data-lazy-src", _attr("data-lazy-src")),
    Strategy("srcset", _first_srcset_entry),
]


def resolve_image_source(img: Tag) -> str:
    value, _ = first_match(IMAGE_SOURCE_STRATEGIES, img)
    return value or ""


def _is_sponsor_link(tag: Tag) -> bool:
    return tag.name == "a" and SPONSOR_LINK_MARKER in str(tag.get("href") or "")


def _from_links(soup, base_url: str) -> List[Sponsor]:
    sponsors = []
    for link in soup.select(f'a[href*="{SPONSOR_LINK_MARKER}"]'):
        img = link.find("img")
        if img is None:
            continue
        src = resolve_image_source(img)
        if not src:
            continue
        in_carousel = link.find_parent(class_="tns-item") is not None
        name = clean_text(img.get("alt")) or clean_text(link.get("title"))
        sponsors.append(
            Sponsor(
                name=name or DEFAULT_SPONSOR_NAME,
                logo_url=absolutize_url(src, base_url),
                link_url=absolutize_url(link.get("href"), base_url),
                source_tag="tns-carousel" if in_carousel else "sponsor-link",
            )
        )
    return sponsors


def _standalone_images(soup) -> List[Tag]:
    images: List[Tag] = []
    seen = set()
    for selector in STANDALONE_IMAGE_SELECTORS:
        for img in soup.select(selector):
            if id(img) in seen:
                continue
            seen.add(id(img))
            images.append(img)
    return images


def _from_standalone_images(soup, base_url: str) -> List[Sponsor]:
    sponsors = []
    for img in _standalone_images(soup):
        if img.find_parent(_is_sponsor_link) is not None:
            continue
        src = resolve_image_source(img)
        if SPONSOR_IMAGE_MARKER not in src.lower():
            continue
        sponsors.append(
            Sponsor(
                name=clean_text(img.get("alt")) or DEFAULT_SPONSOR_NAME,
                logo_url=absolutize_url(src, base_url),
                link_url="",
                source_tag="standalone-image",
            )
        )
    return sponsors


def extract_sponsors(html: str, base_url: str) -> List[Sponsor]:
    """Linked sponsors first, then standalone logos; unique by logo URL."""
    soup = parse_html(html)
    candidates = _from_links(soup, base_url) + _from_standalone_images(soup, base_url)
    return dedupe(candidates, lambda sponsor: sponsor.logo_url)


class SponsorsScraper(BaseScraper):
    """Sponsor logos"""

    @property
    def section(self) -> Section:
        return Section.SPONSORS

    @property
    def listing_path(self) -> str:
        return self.settings.site.sponsors_path

    async def scrape(self) -> SectionEnvelope:
        html = await self.fetcher.fetch(self.listing_url)
        sponsors = extract_sponsors(html, self.base_url)
        self._log_found("unique sponsors", len(sponsors))
        return SectionEnvelope(section=self.section, items=sponsors, total_count=len(sponsors))
