"""Islamic prayer times and Ramadan calendar engine."""

from .countdown import FastingEvent, NextPrayer, next_fasting_event, next_prayer
from .errors import (
    CalendarUnavailable,
    InvalidComputation,
    InvalidCoordinate,
    InvalidRemoteResponse,
    MiqatError,
    RamadanUnresolvable,
    UnknownMadhab,
    UnknownMethod,
    UnknownTimezone,
    UnresolvableAngle,
)
from .geo import GeoCoordinate, Qibla, qibla_direction
from .hijri import (
    HijriDate,
    HijriGregorianConverter,
    TabularCalendar,
    UmmAlQuraCalendar,
    gregorian_to_hijri,
    hijri_month_to_gregorian_range,
    hijri_to_gregorian,
)
from .islamic_dates import (
    IMPORTANT_ISLAMIC_DATES,
    ImportantDate,
    SchoolFilter,
    important_dates_for_day,
    important_dates_for_month,
    is_important_date,
    is_significant_month,
)
from .methods import METHODS, CalculationMethod, Madhab, Method, get_madhab, get_method
from .prayer_times import PRAYER_NAMES, PrayerTimeSet, compute_prayer_times
from .ramadan import RamadanResolution, RamadanStatus, RamadanWindow, resolve_ramadan
from .timezones import utc_offset_minutes
from .validation import validate_prayer_times

__version__ = "1.0.0"
