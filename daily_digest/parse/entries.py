"""
Tag scanning over raw feed text.

These helpers locate elements with regular expressions instead of building
a document tree, so feeds that a strict XML parser would reject still yield
entries. Matching is not re-entrant: an element is the first opening tag
paired with the first closing tag of the same name after it, so a tag
nested inside itself is cut short.

Fallback chains are expressed as ordered candidate tuples evaluated
first-match-wins; the order is part of the observable behavior.
"""

from __future__ import annotations

from functools import lru_cache
import re

from .text import clean_text, decode_entities

# Entry-level tags, in detection order: Atom first, then RSS
ENTRY_TAGS = ("entry", "item")

# Publication date fields, in priority order
DATE_TAGS = ("published", "updated", "pubDate", "dc:date")

# Summary fields, in priority order
SUMMARY_TAGS = ("summary", "description")

SUMMARY_MAX_CHARS = 500

_QUOTED = r"""["']([^"']+)["']"""

# Link candidates, in priority order. The first three read an href attribute
# (Atom), the last reads element text (RSS).
LINK_PATTERNS = (
    re.compile(rf"<link\b[^>]*?\bhref={_QUOTED}[^>]*?\brel=[\"']alternate[\"']", re.IGNORECASE),
    re.compile(rf"<link\b[^>]*?\brel=[\"']alternate[\"'][^>]*?\bhref={_QUOTED}", re.IGNORECASE),
    re.compile(rf"<link\b[^>]*?\bhref={_QUOTED}", re.IGNORECASE),
    re.compile(r"<link(?:\s[^>]*)?(?<!/)>([^<]+)</link\s*>", re.IGNORECASE),
)


@lru_cache(maxsize=None)
def _element_re(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}(?:\s[^>]*)?(?<!/)>([\s\S]*?)</{name}\s*>", re.IGNORECASE)


@lru_cache(maxsize=None)
def _block_re(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}(?:\s[^>]*)?(?<!/)>[\s\S]*?</{name}\s*>", re.IGNORECASE)


def extract_blocks(xml: str, tag: str) -> list[str]:
    """Return every `<tag>...</tag>` fragment in document order."""
    return _block_re(tag).findall(xml)


def extract_tag(fragment: str, tag: str) -> str:
    """Return the trimmed inner text of the first `<tag>` element, or ""."""
    match = _element_re(tag).search(fragment)
    return match.group(1).strip() if match else ""


def first_tag(fragment: str, tags: tuple[str, ...]) -> str:
    """Return the inner text of the first candidate tag that is non-empty."""
    for tag in tags:
        value = extract_tag(fragment, tag)
        if value:
            return value
    return ""


def detect_entries(xml: str) -> tuple[str | None, list[str]]:
    """Find entry fragments, trying each entry tag in turn.

    Returns:
        Tuple of (matched tag, fragments). The tag is None when no
        candidate produced any fragment.
    """
    for tag in ENTRY_TAGS:
        blocks = extract_blocks(xml, tag)
        if blocks:
            return tag, blocks
    return None, []


def extract_title(fragment: str) -> str:
    return clean_text(extract_tag(fragment, "title"))


def extract_link(fragment: str) -> str:
    """Return the entry URL.

    Prefers an Atom `rel="alternate"` link (either attribute order), then
    any link with an href, then RSS `<link>` text.
    """
    for pattern in LINK_PATTERNS:
        match = pattern.search(fragment)
        if match:
            link = decode_entities(match.group(1)).strip()
            if link:
                return link
    return ""


def extract_date(fragment: str) -> str:
    return first_tag(fragment, DATE_TAGS)


def extract_summary(fragment: str) -> str:
    # Truncate after decoding so an entity is never split
    return clean_text(first_tag(fragment, SUMMARY_TAGS))[:SUMMARY_MAX_CHARS]
