"""
Hijri <-> Gregorian conversion.

Two calendar sources are available:

* `UmmAlQuraCalendar` - the official Saudi tables shipped with `hijridate`,
  1343-1500 AH (1924-2077 CE). Treated as authoritative.
* `TabularCalendar` - the arithmetic civil calendar (30-year cycle with 11
  leap years). Deterministic for any date, off by a day or so against
  sighting-based calendars.

`HijriGregorianConverter` asks the primary source first and falls back to the
secondary one when the primary cannot answer.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, TypeVar

from hijridate import Gregorian, Hijri

from .errors import CalendarUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

RAMADAN = 9

HIJRI_MONTH_NAMES = (
    "Muharram",
    "Safar",
    "Rabi al-Awwal",
    "Rabi al-Thani",
    "Jumada al-Ula",
    "Jumada al-Akhirah",
    "Rajab",
    "Shaban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qadah",
    "Dhu al-Hijjah",
)


def month_name(month: int) -> str:
    return HIJRI_MONTH_NAMES[month - 1]


@dataclass(frozen=True)
class HijriDate:
    day: int
    month: int
    year: int
    month_name: str | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Hijri month must be 1-12, got {self.month}")
        if not 1 <= self.day <= 30:
            raise ValueError(f"Hijri day must be 1-30, got {self.day}")
        if self.year < 1:
            raise ValueError(f"Hijri year must be positive, got {self.year}")
        if self.month_name is None:
            object.__setattr__(self, "month_name", month_name(self.month))

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "month": self.month,
            "year": self.year,
            "monthName": self.month_name,
        }

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class HijriCalendar(ABC):
    """A source of Hijri calendar facts."""

    name = "abstract"

    @abstractmethod
    def to_hijri(self, day: date) -> HijriDate:
        """Hijri date for a Gregorian date."""

    @abstractmethod
    def to_gregorian(self, hijri: HijriDate) -> date:
        """Gregorian date for a Hijri date."""

    @abstractmethod
    def month_length(self, year: int, month: int) -> int:
        """Number of days (29 or 30) in a Hijri month."""

    def month_range(self, month: int, year: int) -> list[date]:
        """Every Gregorian date of a Hijri month, in order."""
        start = self.to_gregorian(HijriDate(1, month, year))
        return [start + timedelta(days=i) for i in range(self.month_length(year, month))]


class UmmAlQuraCalendar(HijriCalendar):
    name = "umm-al-qura"

    def to_hijri(self, day: date) -> HijriDate:
        try:
            h = Gregorian(day.year, day.month, day.day).to_hijri()
        except OverflowError as exc:
            raise CalendarUnavailable(f"Umm al-Qura: cannot convert {day.isoformat()}: {exc}") from exc
        return HijriDate(h.day, h.month, h.year)

    def to_gregorian(self, hijri: HijriDate) -> date:
        try:
            g = Hijri(hijri.year, hijri.month, hijri.day).to_gregorian()
        except OverflowError as exc:
            raise CalendarUnavailable(f"Umm al-Qura: cannot convert {hijri.isoformat()} AH: {exc}") from exc
        return date(g.year, g.month, g.day)

    def month_length(self, year: int, month: int) -> int:
        try:
            return Hijri(year, month, 1).month_length()
        except OverflowError as exc:
            raise CalendarUnavailable(f"Umm al-Qura: no data for {year}-{month:02d} AH: {exc}") from exc


# Julian day number of 1 Muharram 1 AH (civil epoch, 16 July 622 Julian)
ISLAMIC_EPOCH_JDN = 1948440
# date.toordinal() + this = Julian day number
_ORDINAL_TO_JDN = 1721425


class TabularCalendar(HijriCalendar):
    name = "tabular"

    @staticmethod
    def is_leap_year(year: int) -> bool:
        return (14 + 11 * year) % 30 < 11

    def month_length(self, year: int, month: int) -> int:
        if month == 12 and self.is_leap_year(year):
            return 30
        return 30 if month % 2 == 1 else 29

    @staticmethod
    def _to_jdn(year: int, month: int, day: int) -> int:
        return (
            day
            + math.ceil(29.5 * (month - 1))
            + (year - 1) * 354
            + (3 + 11 * year) // 30
            + ISLAMIC_EPOCH_JDN - 1
        )

    def to_hijri(self, day: date) -> HijriDate:
        jdn = day.toordinal() + _ORDINAL_TO_JDN
        if jdn < ISLAMIC_EPOCH_JDN:
            raise CalendarUnavailable(f"Tabular: {day.isoformat()} is before the Hijri epoch")
        year = (30 * (jdn - ISLAMIC_EPOCH_JDN) + 10646) // 10631
        month = min(12, math.ceil((jdn - (29 + self._to_jdn(year, 1, 1))) / 29.5) + 1)
        dom = jdn - self._to_jdn(year, month, 1) + 1
        return HijriDate(dom, month, year)

    def to_gregorian(self, hijri: HijriDate) -> date:
        if hijri.day > self.month_length(hijri.year, hijri.month):
            raise ValueError(f"{hijri.isoformat()} AH does not exist")
        try:
            return date.fromordinal(self._to_jdn(hijri.year, hijri.month, hijri.day) - _ORDINAL_TO_JDN)
        except (OverflowError, ValueError) as exc:
            raise CalendarUnavailable(f"Tabular: {hijri.isoformat()} AH is outside the Gregorian range") from exc


class HijriGregorianConverter:
    """Converts through a primary calendar source, falling back to a secondary one."""

    def __init__(self, primary: HijriCalendar | None = None, fallback: HijriCalendar | None = None):
        self.primary = primary or UmmAlQuraCalendar()
        self.fallback = fallback

    @classmethod
    def default(cls) -> "HijriGregorianConverter":
        return cls(UmmAlQuraCalendar(), TabularCalendar())

    def _call(self, op: Callable[[HijriCalendar], T]) -> T:
        try:
            return op(self.primary)
        except CalendarUnavailable as exc:
            if self.fallback is None:
                raise
            logger.warning("%s calendar unavailable (%s); using %s", self.primary.name, exc, self.fallback.name)
            return op(self.fallback)

    def gregorian_to_hijri(self, day: date) -> HijriDate:
        return self._call(lambda cal: cal.to_hijri(day))

    def hijri_to_gregorian(self, hijri: HijriDate) -> date:
        return self._call(lambda cal: cal.to_gregorian(hijri))

    def month_length(self, year: int, month: int) -> int:
        return self._call(lambda cal: cal.month_length(year, month))

    def hijri_month_to_gregorian_range(self, month: int, year: int) -> list[date]:
        if not 1 <= month <= 12:
            raise ValueError(f"Hijri month must be 1-12, got {month}")
        if year < 1:
            raise ValueError(f"Hijri year must be positive, got {year}")
        return self._call(lambda cal: cal.month_range(month, year))

    def shift(self, hijri: HijriDate, days: int) -> HijriDate:
        """
        Move a Hijri date by `days`, rolling into neighbouring months and years
        with the calendar's own month lengths.
        """
        day, month, year = hijri.day + days, hijri.month, hijri.year
        while day < 1:
            month -= 1
            if month < 1:
                month, year = 12, year - 1
            day += self.month_length(year, month)
        while day > (length := self.month_length(year, month)):
            day -= length
            month += 1
            if month > 12:
                month, year = 1, year + 1
        return HijriDate(day, month, year)


_default_converter = HijriGregorianConverter.default()


def gregorian_to_hijri(day: date) -> HijriDate:
    return _default_converter.gregorian_to_hijri(day)


def hijri_to_gregorian(hijri: HijriDate) -> date:
    return _default_converter.hijri_to_gregorian(hijri)


def hijri_month_to_gregorian_range(month: int, year: int) -> list[date]:
    return _default_converter.hijri_month_to_gregorian_range(month, year)
