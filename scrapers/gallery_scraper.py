"""
Gallery Scraper
Album listing plus a bounded visit of each album page for its photos
"""
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from models import Album, Photo, Section, SectionEnvelope
from processing import (
    Strategy,
    absolutize_url,
    clean_text,
    dedupe,
    first_match,
    is_image_url,
    segment_after,
)
from utils.exceptions import FetchError, ParseAnomaly
from .base import BaseScraper, parse_html


logger = logging.getLogger(__name__)

GALLERY_MARKER = "/gallery/"

BACKGROUND_IMAGE_PATTERN = re.compile(
    r"background-image\s*:\s*url\(\s*['\"]?([^'\")]+?)['\"]?\s*\)",
    re.IGNORECASE,
)


def parse_background_image(style: Optional[str]) -> Optional[str]:
    """Pull the URL out of a ``background-image: url(...)`` declaration."""
    if not style:
        return None
    match = BACKGROUND_IMAGE_PATTERN.search(style)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_albums(html: str, base_url: str) -> List[Album]:
    """Albums linked from the gallery listing page, first occurrence per albumId."""
    soup = parse_html(html)
    candidates: List[Album] = []
    for link in soup.select(f'a[href*="{GALLERY_MARKER}"]'):
        title = clean_text(link.get_text())
        url = absolutize_url(link.get("href"), base_url)
        album_id = segment_after(url, GALLERY_MARKER)
        if not title or not album_id or len(title) < 2:
            continue
        candidates.append(Album(title=title, url=url, album_id=album_id))
    return dedupe(candidates, lambda album: album.album_id)


def _alt_text(link: Tag) -> str:
    raw = link.get("data-sub-html") or link.get("title") or ""
    if "<" in raw:
        raw = BeautifulSoup(raw, "lxml").get_text(" ")
    return clean_text(raw)


def _thumbnail_for(link: Tag) -> Optional[str]:
    styled = link.select_one('[style*="background-image"]')
    if styled is None:
        return None
    return parse_background_image(styled.get("style"))


def _photos_from_gallery_items(soup: BeautifulSoup, base_url: str) -> List[Photo]:
    links = soup.select('a.cs-gallery-item, a[class*="gallery-item"]')
    if not links:
        raise ParseAnomaly("no gallery-item anchors", strategy="cs-gallery-item")
    photos = []
    for link in links:
        href = absolutize_url(link.get("href"), base_url)
        if not is_image_url(href):
            continue
        thumb = _thumbnail_for(link)
        photos.append(
            Photo(
                url=href,
                thumbnail_url=absolutize_url(thumb, base_url) if thumb else href,
                alt_text=_alt_text(link),
                source_tag="cs-gallery-item",
            )
        )
    return photos


def _photos_from_gallery_container(soup: BeautifulSoup, base_url: str) -> List[Photo]:
    gallery = soup.select_one('.cs-gallery, [class*="cs-gallery"]')
    if gallery is None:
        raise ParseAnomaly("no cs-gallery container", strategy="cs-gallery-fallback")
    photos = []
    for link in gallery.find_all("a", href=True):
        href = absolutize_url(link.get("href"), base_url)
        if not is_image_url(href):
            continue
        # This layout only marks real photos with a background thumbnail
        thumb = _thumbnail_for(link)
        if not thumb:
            continue
        photos.append(
            Photo(
                url=href,
                thumbnail_url=absolutize_url(thumb, base_url),
                alt_text="",
                source_tag="cs-gallery-fallback",
            )
        )
    return photos


PHOTO_STRATEGIES = [
    Strategy("cs-gallery-item", _photos_from_gallery_items),
    Strategy("cs-gallery-fallback", _photos_from_gallery_container),
]


def extract_photos(html: str, base_url: str, max_photos: int = 30) -> List[Photo]:
    """Photos on one album page: unique by url, capped at ``max_photos``."""
    soup = parse_html(html)
    photos, _ = first_match(PHOTO_STRATEGIES, soup, base_url)
    if not photos:
        return []
    return dedupe(photos, lambda photo: photo.url)[:max_photos]


class GalleryScraper(BaseScraper):
    """Albums and their photos"""

    @property
    def section(self) -> Section:
        return Section.GALLERY

    @property
    def listing_path(self) -> str:
        return self.settings.site.gallery_path

    async def scrape(self) -> SectionEnvelope:
        html = await self.fetcher.fetch(self.listing_url)
        albums = extract_albums(html, self.base_url)
        self._log_found("albums", len(albums))

        limit = min(len(albums), self.settings.scraper.album_limit)
        albums_with_photos = []
        for index, album in enumerate(albums[:limit], start=1):
            logger.info(f"[{self.name}] Album {index}/{limit}: {album.title}")
            with_photos = await self.get_details(album)
            if with_photos is not None:
                albums_with_photos.append(with_photos)

        return SectionEnvelope(
            section=self.section,
            items=albums_with_photos,
            total_count=len(albums),
        )

    async def get_details(self, album: Album) -> Optional[Album]:
        """Visit one album page; None when it fails or holds no photos."""
        try:
            html = await self.fetcher.fetch(album.url)
        except FetchError as e:
            self._log_error(f"Album '{album.title}' skipped", e)
            return None

        photos = extract_photos(html, self.base_url, self.settings.scraper.max_photos_per_album)
        if not photos:
            logger.warning(f"[{self.name}] No photos found in '{album.title}'")
            return None
        logger.info(f"[{self.name}]   {len(photos)} photos")
        return album.with_photos(photos)
