"""
Turn a caller-supplied timezone into the UTC offset (minutes east) for a date.
"""

import re
from datetime import date, datetime, time, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import UnknownTimezone

_OFFSET_RE = re.compile(r"(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?", re.IGNORECASE)

# Offsets in use around the world stay within UTC-12:00 .. UTC+14:00
MIN_OFFSET_MINUTES = -12 * 60
MAX_OFFSET_MINUTES = 14 * 60


def parse_offset(value: str) -> int | None:
    """`+03:00`, `-0530`, `UTC+3` -> minutes east of UTC; None if not an offset."""
    text = value.strip()
    if text.upper() in {"UTC", "GMT", "Z"}:
        return 0
    match = _OFFSET_RE.fullmatch(text)
    if not match:
        return None
    sign, hours, minutes = match.groups()
    total = int(hours) * 60 + int(minutes or 0)
    return -total if sign == "-" else total


def get_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise UnknownTimezone(f"Unknown timezone: {name!r}") from exc


def utc_offset_minutes(tz: "int | float | str", day: date) -> int:
    """
    Offset of `tz` from UTC on `day`, in minutes east.

    tz: minutes east of UTC, an offset string, or an IANA zone name. IANA zones
    are evaluated at local noon so the DST rule of that date applies.
    """
    if isinstance(tz, (int, float)) and not isinstance(tz, bool):
        minutes = int(tz)
    else:
        parsed = parse_offset(str(tz))
        if parsed is None:
            zone = get_zone(str(tz).strip())
            offset = datetime.combine(day, time(12, 0), tzinfo=zone).utcoffset()
            parsed = int(offset.total_seconds() // 60) if offset else 0
        minutes = parsed
    if not MIN_OFFSET_MINUTES <= minutes <= MAX_OFFSET_MINUTES:
        raise UnknownTimezone(f"UTC offset out of range: {minutes} minutes")
    return minutes
