"""
Processing Module
Deduplication, URL normalization and ordered extraction strategies
"""
from .normalize import (
    IMAGE_URL_PATTERN,
    dedupe,
    absolutize_url,
    segment_after,
    is_image_url,
    clean_text,
    text_lines,
)
from .strategies import Strategy, first_match

__all__ = [
    "IMAGE_URL_PATTERN",
    "dedupe",
    "absolutize_url",
    "segment_after",
    "is_image_url",
    "clean_text",
    "text_lines",
    "Strategy",
    "first_match",
]
