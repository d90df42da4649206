"""
Data Models / Schemas
Records produced by the extractors and the per-section envelope
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Section(str, Enum):
    """Scraped sections, in run order"""
    GALLERY = "gallery"
    EVENTS = "events"
    NEWS = "news"
    SPONSORS = "sponsors"

    @property
    def filename(self) -> str:
        return f"{self.value}-data.json"


# Wire names of the item list and total field for each snapshot file
SECTION_KEYS: Dict[Section, tuple] = {
    Section.GALLERY: ("albums", "totalAlbums"),
    Section.EVENTS: ("events", "totalEvents"),
    Section.NEWS: ("news", "totalArticles"),
    Section.SPONSORS: ("sponsors", None),
}


class Record(BaseModel):
    """Base for scraped records: camelCase on the wire, snake_case in code"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Photo(Record):
    """One image inside an album"""
    url: str = Field(..., description="Full-size image URL")
    thumbnail_url: str = Field(..., description="Thumbnail URL, same as url when none found")
    alt_text: str = Field(default="")
    source_tag: str = Field(default="", description="Strategy that found the photo")


class Album(Record):
    """Gallery album"""
    title: str
    url: str
    album_id: str
    photos: Optional[List[Photo]] = Field(default=None, description="Set once the album page was visited")
    photo_count: Optional[int] = None
    scraped_at: Optional[datetime] = None

    def with_photos(self, photos: List[Photo]) -> "Album":
        return self.model_copy(
            update={"photos": list(photos), "photo_count": len(photos), "scraped_at": utcnow()}
        )


class Event(Record):
    """Upcoming club event"""
    title: str
    date_text: str = ""
    location: str = ""
    url: str
    event_id: str
    kind: str = "event"


class NewsItem(Record):
    """News article or race result"""
    title: str
    url: str
    article_id: str
    date_text: str = ""
    excerpt: str = ""
    is_featured: bool = False
    content: Optional[str] = None
    content_length: Optional[int] = None
    kind: str = "news"

    def with_content(self, content: str) -> "NewsItem":
        return self.model_copy(update={"content": content, "content_length": len(content)})


class Sponsor(Record):
    """Sponsor logo"""
    name: str = "Sponsor"
    logo_url: str
    link_url: str = ""
    source_tag: str = ""


SectionItem = Union[Album, Event, NewsItem, Sponsor]


class SectionEnvelope(BaseModel):
    """Uniform, immutable wrapper around one section's records"""
    model_config = ConfigDict(frozen=True)

    section: Section
    items: List[SectionItem] = Field(default_factory=list)
    total_count: int = 0
    scraped_at: datetime = Field(default_factory=utcnow)
    error: Optional[str] = None

    @classmethod
    def failed(cls, section: Section, error: str) -> "SectionEnvelope":
        return cls(section=section, items=[], total_count=0, error=error)

    def to_snapshot(self) -> Dict[str, Any]:
        """Render the snapshot-file shape, e.g. ``{"albums": [...], "totalAlbums": 3, ...}``."""
        items_key, total_key = SECTION_KEYS[self.section]
        payload: Dict[str, Any] = {items_key: [item.to_wire() for item in self.items]}
        if total_key:
            payload[total_key] = self.total_count
        payload["scrapedAt"] = self.scraped_at.isoformat()
        if self.error is not None:
            payload["error"] = self.error
        return payload
