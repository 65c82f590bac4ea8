"""
Caller-side choice between a remote prayer-time service and local computation.

The engine itself never does I/O. A caller hands over a zero-argument
`fetch_remote` callable (doing whatever HTTP, caching and timeouts it likes);
the payload is parsed from the AlAdhan response shape and validated exactly
like a locally computed set. Anything that goes wrong on the remote side
degrades to `compute_prayer_times`.
"""

import logging
import re
from collections.abc import Mapping
from datetime import date
from enum import Enum
from typing import Any, Callable

from .errors import InvalidRemoteResponse
from .geo import GeoCoordinate
from .methods import CalculationMethod, Madhab, Method
from .prayer_times import PRAYER_NAMES, PrayerTimeSet, compute_prayer_times
from .validation import validate_prayer_times

logger = logging.getLogger(__name__)

# AlAdhan may append the zone, e.g. "05:12 (+03)" or "05:12 (EET)"
_TIME_PREFIX_RE = re.compile(r"^\s*(\d{1,2}:\d{2})")


class PrayerTimesSource(str, Enum):
    API = "api"
    LOCAL = "local"


def _clean_time(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    match = _TIME_PREFIX_RE.match(value)
    if not match:
        return value
    hours, minutes = match.group(1).split(":")
    return f"{int(hours):02d}:{minutes}"


def _unwrap_data(payload: Any) -> Any:
    if isinstance(payload, Mapping) and "data" in payload:
        return payload["data"]
    return payload


def parse_aladhan_timings(payload: Any) -> PrayerTimeSet:
    """
    Build a `PrayerTimeSet` from an AlAdhan `timings` response.

    Accepts the whole envelope, its `data` object or the bare `timings`
    mapping. Does not check ordering; run `validate_prayer_times` for that.
    """
    data = _unwrap_data(payload)
    timings = data.get("timings", data) if isinstance(data, Mapping) else None
    if not isinstance(timings, Mapping):
        raise InvalidRemoteResponse("Response has no timings object")
    missing = [name for name in PRAYER_NAMES if name not in timings]
    if missing:
        raise InvalidRemoteResponse(f"Timings missing: {', '.join(missing)}")
    return PrayerTimeSet(*(_clean_time(timings[name]) for name in PRAYER_NAMES))


def parse_aladhan_hijri_month(payload: Any) -> list[date]:
    """Gregorian dates of an AlAdhan `hToGCalendar` response, in order."""
    days = _unwrap_data(payload)
    if not isinstance(days, list) or not days:
        raise InvalidRemoteResponse("Calendar response has no days")
    result = []
    for entry in days:
        try:
            gregorian = entry["gregorian"]
            result.append(date(
                int(gregorian["year"]),
                int(gregorian["month"]["number"]),
                int(gregorian["day"]),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidRemoteResponse(f"Malformed calendar day: {entry!r}") from exc
    return result


def prayer_times_with_fallback(
    fetch_remote: Callable[[], Any],
    coord: GeoCoordinate,
    day: date,
    method: "Method | CalculationMethod | str | int" = Method.MAKKAH,
    madhab: "Madhab | str | int" = Madhab.STANDARD,
    timezone_offset_minutes: float = 0,
) -> tuple[PrayerTimeSet, PrayerTimesSource]:
    """
    Remote times when `fetch_remote()` succeeds and validates, local otherwise.

    Engine errors from the local fallback (polar input, unknown method)
    propagate to the caller.
    """
    try:
        remote = parse_aladhan_timings(fetch_remote())
    except Exception as exc:
        logger.warning("Remote prayer times unavailable, calculating locally: %s", exc)
    else:
        if validate_prayer_times(remote):
            return remote, PrayerTimesSource.API
        logger.warning("Remote prayer times failed validation, calculating locally: %s", remote.as_list())

    local = compute_prayer_times(coord, day, method, madhab, timezone_offset_minutes)
    return local, PrayerTimesSource.LOCAL
