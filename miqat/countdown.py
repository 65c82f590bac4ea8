"""
Next-prayer and fasting countdowns over a computed (or fetched) set of times.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from .prayer_times import PRAYER_NAMES, PrayerTimeSet


@dataclass(frozen=True)
class NextPrayer:
    name: str
    time: str
    milliseconds_until: int
    is_tomorrow: bool

    @property
    def countdown(self) -> str:
        return format_countdown(self.milliseconds_until)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "time": self.time,
            "countdown": self.countdown,
            "timeUntil": self.milliseconds_until,
            "isTomorrow": self.is_tomorrow,
        }


@dataclass(frozen=True)
class FastingEvent:
    event: str
    """"iftar" (Maghrib) or "suhoor" (end of suhoor at Fajr)."""
    time: str
    milliseconds_until: int

    @property
    def countdown(self) -> str:
        """`HH:MM:SS` until the event."""
        seconds = self.milliseconds_until // 1000
        hours, rest = divmod(seconds, 3600)
        return f"{hours:02d}:{rest // 60:02d}:{rest % 60:02d}"

    def to_dict(self) -> dict:
        return {
            "nextEvent": self.event,
            "time": self.time,
            "timeUntilEvent": self.countdown,
            "timeUntil": self.milliseconds_until,
        }


def format_countdown(milliseconds: int) -> str:
    """`1h 5m 3s`, `5m 3s` or `3s`."""
    seconds = max(0, milliseconds) // 1000
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def _at(now: datetime, hhmm: str, days_ahead: int = 0) -> datetime:
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return now.replace(hour=hours, minute=minutes, second=0, microsecond=0) + timedelta(days=days_ahead)


def _milliseconds(delta: timedelta) -> int:
    return delta // timedelta(milliseconds=1)


def next_prayer(times: PrayerTimeSet, now: datetime, tomorrow: PrayerTimeSet | None = None) -> NextPrayer:
    """
    First of the six instants strictly after `now`; past Isha, tomorrow's Fajr.

    `times` belongs to the calendar day of `now`; prayers it marks as past
    midnight count on the following date. Tomorrow's Fajr comes from
    `tomorrow` when given, otherwise today's Fajr is reused one day later.
    """
    for name in PRAYER_NAMES:
        at = _at(now, times[name], times.day_offset(name))
        if at > now:
            return NextPrayer(name, times[name], _milliseconds(at - now), False)

    fajr = (tomorrow or times).fajr
    at = _at(now, fajr, days_ahead=1)
    return NextPrayer("Fajr", fajr, _milliseconds(at - now), True)


def next_fasting_event(times: PrayerTimeSet, now: datetime, tomorrow: PrayerTimeSet | None = None) -> FastingEvent:
    """End of suhoor until Fajr, iftar until Maghrib, then the next day's Fajr."""
    fajr_today = _at(now, times.fajr)
    if now < fajr_today:
        return FastingEvent("suhoor", times.fajr, _milliseconds(fajr_today - now))

    maghrib = _at(now, times.maghrib, times.day_offset("Maghrib"))
    if now < maghrib:
        return FastingEvent("iftar", times.maghrib, _milliseconds(maghrib - now))

    fajr = (tomorrow or times).fajr
    at = _at(now, fajr, days_ahead=1)
    return FastingEvent("suhoor", fajr, _milliseconds(at - now))
