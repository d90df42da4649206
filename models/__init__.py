"""
Data Models
"""
from .schemas import (
    Section,
    SECTION_KEYS,
    Record,
    Photo,
    Album,
    Event,
    NewsItem,
    Sponsor,
    SectionEnvelope,
    utcnow,
)

__all__ = [
    "Section",
    "SECTION_KEYS",
    "Record",
    "Photo",
    "Album",
    "Event",
    "NewsItem",
    "Sponsor",
    "SectionEnvelope",
    "utcnow",
]
