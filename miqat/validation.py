"""
Sanity checks for a prayer-time set, whatever produced it.

Works on the local `PrayerTimeSet` and on the raw `timings` mapping of a remote
response alike, so a caller can reject a corrupt remote payload and fall back
to local computation.
"""

import re
from collections.abc import Mapping

from .prayer_times import MINUTES_PER_DAY, PRAYER_NAMES, PrayerTimeSet

TIME_RE = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")


def _to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def is_valid_time(value: object) -> bool:
    """True for a 24-hour `HH:MM` string."""
    return isinstance(value, str) and TIME_RE.fullmatch(value) is not None


def validate_prayer_times(times: object) -> bool:
    """
    Check that all six times exist, are `HH:MM` and strictly increase
    Fajr < Sunrise < Dhuhr < Asr < Maghrib < Isha.

    A `PrayerTimeSet` may mark prayers as past midnight (`next_day`); those
    count from the following midnight. A bare mapping carries no such marker
    and must increase on the clock.

    Never raises; anything that is not a set of times is simply invalid.
    """
    day_offsets = [0] * len(PRAYER_NAMES)
    if isinstance(times, PrayerTimeSet):
        day_offsets = [times.day_offset(name) for name in PRAYER_NAMES]
        times = times.as_dict()
    if not isinstance(times, Mapping):
        return False

    values = [times.get(name) for name in PRAYER_NAMES]
    if not all(is_valid_time(v) for v in values):
        return False

    minutes = [_to_minutes(v) + offset * MINUTES_PER_DAY for v, offset in zip(values, day_offsets)]
    return all(a < b for a, b in zip(minutes, minutes[1:]))
