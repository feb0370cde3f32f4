"""Formatting helpers shared by the sitemap writers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

from sitemapkit.errors import ValidationError

DateLike = Union[str, int, date, datetime, None]


def is_timestamp(value: object) -> bool:
    """Check whether a value looks like a Unix timestamp (ASCII digits only)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and value.isascii() and value.isdigit()


def normalize_date(value: DateLike) -> str:
    """Normalize a last-modified value to its ISO form.

    Args:
        value: ISO date string, Unix timestamp (int or digit string),
            date/datetime, or None for today

    Returns:
        ISO date string such as "2024-01-15". Non-timestamp strings are
        returned unchanged so W3C datetimes pass through.

    Raises:
        ValidationError: If a timestamp is outside the supported date range
    """
    if value is None:
        return date.today().isoformat()
    if is_timestamp(value):
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc).date().isoformat()
        except (ValueError, OverflowError, OSError) as e:
            raise ValidationError(f"timestamp {value!r} is out of range: {e}") from e
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def cdata(value: object) -> str:
    """Wrap text in a CDATA section.

    The text is not inspected: a literal "]]>" inside it ends the section early.
    """
    return f"<![CDATA[{value}]]>"
