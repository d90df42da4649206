"""
News Scraper
News/results listing plus full article text from a bounded number of detail pages
"""
import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from models import NewsItem, Section, SectionEnvelope
from processing import Strategy, absolutize_url, clean_text, dedupe, first_match, segment_after
from utils.exceptions import FetchError, ParseAnomaly
from .base import BaseScraper, parse_html


logger = logging.getLogger(__name__)

NEWS_MARKER = "/news/"
CONTENT_UNAVAILABLE = "Content not available"

CARD_SELECTOR = '[class*="card"], [class*="article"], [class*="post"]'
DATE_SELECTOR = '[class*="date"], time, .text-muted'
EXCERPT_SELECTOR = 'p, [class*="excerpt"], [class*="description"]'

# Most specific first; the first container with enough text wins
CONTENT_SELECTORS = (
    'article [class*="content"]',
    'article [class*="body"]',
    '[class*="article-content"]',
    "article",
    ".content",
    "main",
)
NOISE_SELECTOR = (
    'script, style, noscript, nav, header, footer, form, iframe, '
    '[class*="share"], [class*="social"], [class*="breadcrumb"]'
)
ROW_SEPARATOR = " | "
# Shorter paragraphs are captions and link stubs
MIN_PARAGRAPH_LENGTH = 20


def news_kind(title: str) -> str:
    return "result" if "result" in (title or "").lower() else "news"


def _card_title(card: Tag, link: Tag) -> str:
    title = clean_text(link.get_text())
    if title:
        return title
    heading = card.select_one("h1, h2, h3, h4, h5")
    return clean_text(heading.get_text()) if heading else ""


def _card_date(card: Tag) -> str:
    element = card.select_one(DATE_SELECTOR)
    if element is None:
        return ""
    return clean_text(element.get_text()) or str(element.get("datetime") or "").strip()


def _card_excerpt(card: Tag) -> str:
    element = card.select_one(EXCERPT_SELECTOR)
    return clean_text(element.get_text()) if element else ""


def parse_news_card(card: Tag, base_url: str) -> Optional[NewsItem]:
    link = card.select_one(f'a[href*="{NEWS_MARKER}"]')
    if link is None:
        return None

    title = _card_title(card, link)
    url = absolutize_url(link.get("href"), base_url)
    article_id = segment_after(url, NEWS_MARKER)
    if not title or not article_id or len(title) < 3:
        return None

    is_featured = "Featured" in card.get_text() or card.select_one('[class*="featured"]') is not None
    return NewsItem(
        title=title,
        url=url,
        article_id=article_id,
        date_text=_card_date(card),
        excerpt=_card_excerpt(card),
        is_featured=is_featured,
        kind=news_kind(title),
    )


def extract_news(html: str, base_url: str) -> List[NewsItem]:
    soup = parse_html(html)
    items = []
    for card in soup.select(CARD_SELECTOR):
        item = parse_news_card(card, base_url)
        if item is not None:
            items.append(item)
    return dedupe(items, lambda item: item.article_id)


def _strip_noise(root: Tag) -> None:
    for element in root.select(NOISE_SELECTOR):
        element.decompose()


def _row_text(row: Tag) -> str:
    cells = [clean_text(cell.get_text(" ")) for cell in row.find_all(["th", "td"])]
    return ROW_SEPARATOR.join(cell for cell in cells if cell)


def structured_text(container: Tag) -> str:
    """
    Paragraphs longer than MIN_PARAGRAPH_LENGTH, table rows and list items in
    document order, blank-line separated. Falls back to the container's raw
    text when none are present.
    """
    fragments: List[str] = []
    for element in container.find_all(["p", "tr", "li"]):
        # Text inside a row or list item is already covered by that element
        if element.find_parent(["tr", "li"]) is not None and element.name in ("p", "li"):
            continue
        if element.name == "tr":
            text = _row_text(element)
        else:
            text = clean_text(element.get_text(" "))
        if element.name == "p" and len(text) <= MIN_PARAGRAPH_LENGTH:
            continue
        if text and (not fragments or fragments[-1] != text):
            fragments.append(text)

    if fragments:
        return "\n\n".join(fragments)
    return "\n".join(line.strip() for line in container.get_text("\n").split("\n") if line.strip())


def _container_strategy(selector: str) -> Strategy[str]:
    def extract(soup: BeautifulSoup, min_length: int) -> Optional[str]:
        container = soup.select_one(selector)
        if container is None:
            raise ParseAnomaly(f"no element matches {selector!r}", strategy=selector)
        text = structured_text(container)
        return text if len(text) > min_length else None

    return Strategy(selector, extract)


CONTENT_STRATEGIES = [_container_strategy(selector) for selector in CONTENT_SELECTORS]


def _body_text(html: str) -> str:
    soup = parse_html(html)
    _strip_noise(soup)
    root = soup.body or soup
    return structured_text(root)


def extract_article_content(html: str, min_length: int = 100) -> str:
    """Full article text, or an empty string when the page has none."""
    soup = parse_html(html)
    _strip_noise(soup)
    content, strategy = first_match(CONTENT_STRATEGIES, soup, min_length)
    if content:
        logger.debug("Article content taken from %s", strategy)
        return content
    return _body_text(html)


class NewsScraper(BaseScraper):
    """News articles and race results"""

    @property
    def section(self) -> Section:
        return Section.NEWS

    @property
    def listing_path(self) -> str:
        return self.settings.site.news_path

    async def scrape(self) -> SectionEnvelope:
        html = await self.fetcher.fetch(self.listing_url)
        items = extract_news(html, self.base_url)
        self._log_found("articles", len(items))

        limit = min(len(items), self.settings.scraper.news_limit)
        with_content = []
        for index, item in enumerate(items[:limit], start=1):
            logger.info(f"[{self.name}] Fetching {index}/{limit}: {item.title[:40]}")
            with_content.append(await self.get_details(item))
            if index < limit:
                await self._pause(self.settings.scraper.article_pause)

        return SectionEnvelope(section=self.section, items=with_content, total_count=len(items))

    async def get_details(self, item: NewsItem) -> NewsItem:
        """Attach full content; on failure fall back to the excerpt."""
        try:
            html = await self.fetcher.fetch(item.url)
        except FetchError as e:
            self._log_error(f"Article '{item.title[:40]}' fell back to excerpt", e)
            return item.with_content(item.excerpt or CONTENT_UNAVAILABLE)

        content = extract_article_content(html, self.settings.scraper.min_content_length)
        logger.info(f"[{self.name}]   {len(content)} chars")
        return item.with_content(content or item.excerpt or CONTENT_UNAVAILABLE)
