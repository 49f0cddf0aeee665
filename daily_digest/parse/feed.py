"""
Feed parsing: raw Atom/RSS text to Articles.

The parser is best-effort. Unrecognized or malformed documents yield fewer
articles (often none) rather than raising, so a bad feed only ever costs its
own entries.
"""

from __future__ import annotations

import logging

from ..core.types import Article, Source
from .dates import parse_date_ms, to_iso
from .entries import (
    detect_entries,
    extract_date,
    extract_link,
    extract_summary,
    extract_title,
)

logger = logging.getLogger("daily_digest.parse")


def parse_feed(xml: str, source: Source, cutoff_ms: int) -> list[Article]:
    """Parse a feed document into the articles published at or after the cutoff.

    Atom `<entry>` fragments are tried first; if there are none, RSS
    `<item>` fragments are used instead. An entry becomes an Article only if
    it has a title, a link and a timestamp >= cutoff_ms. An entry that
    still cannot be built is skipped; this function does not raise.

    Args:
        xml: The raw feed document
        source: The feed the document came from
        cutoff_ms: Earliest admissible timestamp in epoch milliseconds

    Returns:
        Articles in document order. Empty when the document has no entries.
    """
    entry_tag, fragments = detect_entries(xml)
    if entry_tag is None:
        logger.debug("No entries found in %s", source.name)
        return []

    articles: list[Article] = []
    for fragment in fragments:
        title = extract_title(fragment)
        link = extract_link(fragment)
        if not title or not link:
            continue

        timestamp = parse_date_ms(extract_date(fragment))
        if timestamp < cutoff_ms:
            continue

        try:
            article = Article(
                title=title,
                link=link,
                summary=extract_summary(fragment),
                timestamp=timestamp,
                iso_date=to_iso(timestamp),
                source_name=source.name,
                source_url=source.site_url,
            )
        except (ValueError, OverflowError, OSError) as exc:
            logger.debug("Skipping entry %r from %s: %s", title, source.name, exc)
            continue
        articles.append(article)

    logger.debug(
        "Parsed %s: %d %s fragments, %d in window",
        source.name,
        len(fragments),
        entry_tag,
        len(articles),
    )
    return articles
