"""
Date normalization for feed timestamps.

Feeds mix RFC 822 (`Mon, 01 Jan 2024 00:00:00 GMT`, RSS) with ISO 8601
(`2024-01-01T00:00:00Z`, Atom) and assorted variants, so parsing goes
through dateutil rather than a fixed format list.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from dateutil.parser import parse as parse_date

# Common timezone abbreviations seen in RSS pubDate values
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "UT": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "CET": timezone(timedelta(hours=1)),
    "CEST": timezone(timedelta(hours=2)),
}
# Two defaults that differ in every date field. A string that parses to the
# same calendar date under both spelled out its year, month and day itself.
_DEFAULTS = (datetime(1, 1, 1), datetime(2, 2, 2))


def parse_date_ms(value: str | None) -> int:
    """Parse a feed date into epoch milliseconds.

    Returns 0 for empty or unparseable input, which places the entry before
    any realistic cutoff. Strings without a full calendar date ("Monday",
    "10:30", "2024") and dates that cannot be rendered back to ISO 8601
    count as unparseable. Naive datetimes are taken as UTC.

    Examples:
        >>> parse_date_ms("2024-01-01T00:00:00Z")
        1704067200000
        >>> parse_date_ms("Monday")
        0
    """
    if not value or not value.strip():
        return 0
    text = value.strip()
    try:
        parsed = [parse_date(text, default=default, tzinfos=TZINFOS) for default in _DEFAULTS]
    except (ValueError, OverflowError):
        return 0
    if parsed[0].date() != parsed[1].date():
        return 0

    dt = parsed[0]
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        timestamp_ms = int(dt.timestamp() * 1000)
        to_iso(timestamp_ms)
    except (ValueError, OverflowError, OSError):
        return 0
    return timestamp_ms


def to_iso(timestamp_ms: int) -> str:
    """Render epoch milliseconds as `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    dt = datetime.fromtimestamp(timestamp_ms // 1000, tz=timezone.utc)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{timestamp_ms % 1000:03d}Z"
