"""
Feed parsing.

This package turns raw Atom/RSS text into Articles using regex tag
scanning, entity decoding and date normalization.
"""

from .dates import parse_date_ms, to_iso
from .entries import extract_blocks, extract_link, extract_tag
from .feed import parse_feed
from .text import clean_text, decode_entities

__all__ = [
    "parse_feed",
    "parse_date_ms",
    "to_iso",
    "clean_text",
    "decode_entities",
    "extract_blocks",
    "extract_tag",
    "extract_link",
]
