"""
Locate the current or next Ramadan (Hijri month 9) relative to a day.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from .errors import CalendarUnavailable, RamadanUnresolvable
from .hijri import RAMADAN, HijriDate, HijriGregorianConverter

logger = logging.getLogger(__name__)

# Current Hijri year plus the two following ones
YEARS_TO_PROBE = 3


@dataclass(frozen=True)
class RamadanWindow:
    hijri_year: int
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date <= self.start_date:
            raise ValueError(f"Ramadan {self.hijri_year}: end {self.end_date} is not after start {self.start_date}")

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class RamadanStatus:
    is_ramadan: bool
    days_until_ramadan: int | None
    current_ramadan_day: int | None

    @classmethod
    def for_day(cls, window: RamadanWindow, today: date) -> "RamadanStatus":
        if today in window:
            return cls(True, None, (today - window.start_date).days + 1)
        return cls(False, (window.start_date - today).days, None)


@dataclass(frozen=True)
class RamadanResolution:
    current_hijri: HijriDate
    window: RamadanWindow
    status: RamadanStatus

    def to_dict(self) -> dict:
        return {
            "currentHijri": self.current_hijri.to_dict(),
            "ramadanStart": self.window.start_date.isoformat(),
            "ramadanEnd": self.window.end_date.isoformat(),
            "daysUntilRamadan": self.status.days_until_ramadan,
            "isRamadan": self.status.is_ramadan,
            "currentRamadanDay": self.status.current_ramadan_day,
            "ramadanHijriYear": self.window.hijri_year,
        }


def _as_date(day: date) -> date:
    return day.date() if isinstance(day, datetime) else day


def find_ramadan_window(today: date, hijri_year: int, converter: HijriGregorianConverter) -> RamadanWindow:
    """
    First Ramadan starting from `hijri_year` whose last day is not before
    `today`. Years the converter cannot answer for are skipped.
    """
    today = _as_date(today)
    failures = []
    for year in range(hijri_year, hijri_year + YEARS_TO_PROBE):
        try:
            days = converter.hijri_month_to_gregorian_range(RAMADAN, year)
        except CalendarUnavailable as exc:
            logger.debug("Ramadan %d AH unavailable: %s", year, exc)
            failures.append(f"{year}: {exc}")
            continue
        if not days:
            failures.append(f"{year}: empty month")
            continue
        if days[-1] >= today:
            return RamadanWindow(year, days[0], days[-1])
        logger.debug("Ramadan %d AH ended %s, before %s", year, days[-1], today)

    detail = "; ".join(failures) if failures else "every probed Ramadan has already ended"
    raise RamadanUnresolvable(
        f"Could not determine next Ramadan dates from {hijri_year} AH ({detail})"
    )


def resolve_ramadan(
    today: date,
    hijri_offset_days: int = 0,
    converter: HijriGregorianConverter | None = None,
) -> RamadanResolution:
    """
    Resolve the running or upcoming Ramadan window for `today`.

    hijri_offset_days shifts today's Hijri date to follow local moon sighting;
    the shifted year is where the search starts.
    """
    today = _as_date(today)
    converter = converter or HijriGregorianConverter.default()
    try:
        current = converter.gregorian_to_hijri(today)
        if hijri_offset_days:
            current = converter.shift(current, hijri_offset_days)
    except CalendarUnavailable as exc:
        raise RamadanUnresolvable(f"Cannot determine the Hijri date of {today.isoformat()}: {exc}") from exc

    window = find_ramadan_window(today, current.year, converter)
    status = RamadanStatus.for_day(window, today)
    logger.debug(
        "Ramadan %d AH: %s to %s, %s",
        window.hijri_year, window.start_date, window.end_date,
        f"day {status.current_ramadan_day}" if status.is_ramadan else f"{status.days_until_ramadan} days away",
    )
    return RamadanResolution(current, window, status)
