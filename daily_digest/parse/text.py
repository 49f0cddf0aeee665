"""
Entity decoding and markup stripping for feed text.

Only the five core XML entities are recognized; numeric references other
than &#39; are left as-is.
"""

from __future__ import annotations

import re

# Applied in order, &amp; first, so double-escaped markup (`&amp;lt;p&amp;gt;`)
# decodes all the way to `<p>` and is then stripped like any other tag.
ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)

CDATA_RE = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")
TAG_RE = re.compile(r"<[^>]+>")


def decode_entities(text: str) -> str:
    """Decode the core entities by chained replacement, so `&amp;lt;` becomes `<`."""
    for entity, char in ENTITIES:
        text = text.replace(entity, char)
    return text


def clean_text(raw: str) -> str:
    """Turn raw inner-XML text into display text.

    Steps run in a fixed order: decode entities, unwrap CDATA, strip tags,
    trim. Entity-escaped HTML (common in RSS descriptions) is therefore
    decoded first and then stripped along with any literal markup.

    Examples:
        >>> clean_text("Hello &amp; <b>World</b>")
        'Hello & World'
        >>> clean_text("<![CDATA[<p>Hi</p>]]>")
        'Hi'
    """
    if not raw:
        return ""
    text = decode_entities(raw)
    text = CDATA_RE.sub(r"\1", text)
    text = TAG_RE.sub("", text)
    return text.strip()
