"""
Normalization helpers shared by every extractor
"""
import re
from typing import Callable, Hashable, Iterable, List, Optional, TypeVar
from urllib.parse import urljoin

T = TypeVar("T")

IMAGE_URL_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp)", re.IGNORECASE)
MULTIPLE_SPACES = re.compile(r"[ \t\r\f\v]+")


def dedupe(records: Iterable[T], key_fn: Callable[[T], Hashable]) -> List[T]:
    """Drop records whose key was already seen. First occurrence wins and order is kept."""
    unique: List[T] = []
    seen = set()
    for record in records:
        key = key_fn(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def absolutize_url(href: Optional[str], base_url: str) -> str:
    """Resolve ``href`` against the site root; empty input stays empty."""
    value = str(href or "").strip()
    if not value:
        return ""
    if value.startswith(("http://", "https://")):
        return value
    return urljoin(base_url.rstrip("/") + "/", value)


def segment_after(url: str, marker: str) -> str:
    """
    Path segment(s) following ``marker`` with any query string stripped.

    >>> segment_after("https://x.org/gallery/summer-2025?page=2", "/gallery/")
    'summer-2025'
    """
    _, sep, tail = str(url or "").partition(marker)
    if not sep:
        return ""
    return tail.split("?", 1)[0].split("#", 1)[0].strip()


def is_image_url(url: str) -> bool:
    return bool(url) and IMAGE_URL_PATTERN.search(url) is not None


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of inline whitespace and trim."""
    if not text:
        return ""
    return MULTIPLE_SPACES.sub(" ", text).strip()


def text_lines(text: Optional[str]) -> List[str]:
    """Split on newlines, trim each line, drop empties."""
    return [line.strip() for line in str(text or "").split("\n") if line.strip()]
