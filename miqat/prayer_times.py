"""
Prayer times calculation using astronomical formulas (USNO).

Every instant is an hour angle away from solar noon:

    cos(H) = (sin(alt) - sin(lat) * sin(decl)) / (cos(lat) * cos(decl))

Sunrise and sunset use alt = -0.833 deg (refraction and solar disk radius),
Fajr/Isha use the method's twilight angle, Asr uses the altitude at which an
object's shadow is `factor + tan(|lat - decl|)` times its height.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Mapping

from .errors import InvalidComputation, UnresolvableAngle
from .geo import GeoCoordinate
from .methods import CalculationMethod, Madhab, Method, get_madhab, get_method
from .solar import deg2rad, julian_date, rad2deg, sun_position

logger = logging.getLogger(__name__)

PRAYER_NAMES = ("Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha")

SUNRISE_SUNSET_ANGLE = 0.833

# First-guess local times (hours) at which the sun position is sampled
_GUESS_HOURS = {
    "Fajr": 5.0,
    "Sunrise": 6.0,
    "Dhuhr": 12.0,
    "Asr": 13.0,
    "Sunset": 18.0,
    "Maghrib": 18.0,
    "Isha": 18.0,
}

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class PrayerTimeSet:
    """
    Six local wall-clock times, `HH:MM` on the 24-hour clock.

    `next_day` names the prayers that fall after local midnight, e.g. Isha in
    a high-latitude summer; their clock time belongs to the following date.
    """

    fajr: str
    sunrise: str
    dhuhr: str
    asr: str
    maghrib: str
    isha: str
    next_day: frozenset[str] = frozenset()

    def __getitem__(self, name: str) -> str:
        if name not in PRAYER_NAMES:
            raise KeyError(name)
        return getattr(self, name.lower())

    def day_offset(self, name: str) -> int:
        """0 for a time on the set's own date, 1 for one after midnight."""
        return 1 if name in self.next_day else 0

    def as_dict(self) -> dict[str, str]:
        """Same keys as the AlAdhan `timings` object."""
        return {name: self[name] for name in PRAYER_NAMES}

    def as_list(self) -> list[str]:
        return [self[name] for name in PRAYER_NAMES]

    @classmethod
    def from_mapping(cls, timings: Mapping[str, str]) -> "PrayerTimeSet":
        return cls(*(timings[name] for name in PRAYER_NAMES))


def format_minutes(minutes: int) -> str:
    """Minutes after midnight (any integer) as `HH:MM`."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def round_to_minute(hours: float) -> int:
    """Decimal hours to whole minutes, ties rounding up."""
    return math.floor(hours * 60.0 + 0.5)


class _SolarDay:
    """Hour-angle solver for one observer and one date, in local mean time."""

    def __init__(self, coord: GeoCoordinate, day: date):
        self.lat = coord.lat
        # Julian date of local mean midnight
        self.jdate = julian_date(day.year, day.month, day.day) - coord.lng / (15.0 * 24.0)

    def _position(self, guess_hours: float):
        return sun_position(self.jdate + guess_hours / 24.0)

    def mid_day(self, guess_hours: float = 12.0) -> float:
        return 12.0 - self._position(guess_hours).equation_of_time_hours

    def hour_angle(self, event: str, altitude: float, guess_hours: float) -> float:
        """Hours between solar noon and the sun reaching `altitude` degrees."""
        decl = self._position(guess_hours).declination
        numerator = math.sin(deg2rad(altitude)) - math.sin(deg2rad(self.lat)) * math.sin(deg2rad(decl))
        denominator = math.cos(deg2rad(self.lat)) * math.cos(deg2rad(decl))
        if abs(denominator) < 1e-12:
            raise UnresolvableAngle(event, altitude, math.copysign(math.inf, numerator))
        cos_h = numerator / denominator
        if cos_h < -1.0 or cos_h > 1.0:
            raise UnresolvableAngle(event, altitude, cos_h)
        return rad2deg(math.acos(cos_h)) / 15.0

    def asr_altitude(self, factor: int, guess_hours: float) -> float:
        decl = self._position(guess_hours).declination
        zenith_at_noon = abs(self.lat - decl)
        if zenith_at_noon >= 90.0:
            # Sun stays below the horizon at noon; no shadow to measure
            raise UnresolvableAngle("Asr", -zenith_at_noon, math.inf)
        return rad2deg(math.atan(1.0 / (factor + math.tan(deg2rad(zenith_at_noon)))))


def _raw_times(solar: _SolarDay, method: CalculationMethod, madhab: Madhab) -> dict[str, float]:
    """Event times in local mean hours (before the timezone shift)."""
    guess = _GUESS_HOURS

    dhuhr = solar.mid_day(guess["Dhuhr"])
    sunrise = solar.mid_day(guess["Sunrise"]) - solar.hour_angle("Sunrise", -SUNRISE_SUNSET_ANGLE, guess["Sunrise"])
    sunset = solar.mid_day(guess["Sunset"]) + solar.hour_angle("Sunset", -SUNRISE_SUNSET_ANGLE, guess["Sunset"])
    fajr = solar.mid_day(guess["Fajr"]) - solar.hour_angle("Fajr", -method.fajr_angle, guess["Fajr"])

    asr_altitude = solar.asr_altitude(madhab.asr_factor, guess["Asr"])
    asr = solar.mid_day(guess["Asr"]) + solar.hour_angle("Asr", asr_altitude, guess["Asr"])

    if method.maghrib_angle is not None:
        maghrib = solar.mid_day(guess["Maghrib"]) + solar.hour_angle("Maghrib", -method.maghrib_angle, guess["Maghrib"])
    else:
        maghrib = sunset + method.maghrib_minutes / 60.0

    if method.isha_minutes is not None:
        isha = maghrib + method.isha_minutes / 60.0
    else:
        isha = solar.mid_day(guess["Isha"]) + solar.hour_angle("Isha", -method.isha_angle, guess["Isha"])

    return {
        "Fajr": fajr,
        "Sunrise": sunrise,
        "Dhuhr": dhuhr,
        "Asr": asr,
        "Maghrib": maghrib,
        "Isha": isha,
    }


def compute_prayer_times(
    coord: GeoCoordinate,
    day: date,
    method: "Method | CalculationMethod | str | int" = Method.MAKKAH,
    madhab: "Madhab | str | int" = Madhab.STANDARD,
    timezone_offset_minutes: float = 0,
    adjustments: Mapping[str, float] | None = None,
) -> PrayerTimeSet:
    """
    Compute the six prayer instants for one day.

    coord: observer position (already validated by `GeoCoordinate`).
    day: local calendar date.
    method, madhab: registry identifiers (enum, name or AlAdhan id).
    timezone_offset_minutes: minutes east of UTC for that date, e.g. 180 for UTC+3.
    adjustments: optional per-prayer minute offsets keyed by prayer name.

    Raises UnresolvableAngle when the sun never reaches a required altitude
    (polar day/night, extreme twilight) and InvalidComputation when the
    instants are not strictly increasing or Fajr does not fall on `day`.
    Prayers after local midnight are kept and listed in `next_day`.
    """
    calc_method = get_method(method)
    school = get_madhab(madhab)
    adjustments = dict(adjustments or {})
    unknown = set(adjustments) - set(PRAYER_NAMES)
    if unknown:
        raise ValueError(f"Unknown prayer(s) for adjustment: {', '.join(sorted(unknown))}")

    solar = _SolarDay(coord, day)
    raw = _raw_times(solar, calc_method, school)

    # Local mean time -> zone time, minutes from the start of `day`
    shift = timezone_offset_minutes / 60.0 - coord.lng / 15.0
    ordered = [
        round_to_minute(raw[name] + shift + adjustments.get(name, 0) / 60.0)
        for name in PRAYER_NAMES
    ]

    for (earlier, a), (later, b) in zip(zip(PRAYER_NAMES, ordered), zip(PRAYER_NAMES[1:], ordered[1:])):
        if a >= b:
            raise InvalidComputation(
                f"{earlier} ({format_minutes(a)}) is not before {later} ({format_minutes(b)}) "
                f"at ({coord.lat}, {coord.lng}) on {day.isoformat()}"
            )
    if not 0 <= ordered[0] < MINUTES_PER_DAY:
        raise InvalidComputation(
            f"Fajr ({format_minutes(ordered[0])}) falls outside {day.isoformat()} "
            f"at ({coord.lat}, {coord.lng}) with a UTC offset of {timezone_offset_minutes} minutes"
        )

    next_day = frozenset(name for name, m in zip(PRAYER_NAMES, ordered) if m >= MINUTES_PER_DAY)
    result = PrayerTimeSet(*(format_minutes(m) for m in ordered), next_day=next_day)
    logger.debug(
        "Computed %s times for (%s, %s) on %s [%s, tz %+d min]: %s%s",
        calc_method.id.value, coord.lat, coord.lng, day.isoformat(), school.value,
        timezone_offset_minutes, result.as_list(),
        f" ({', '.join(sorted(next_day))} after midnight)" if next_day else "",
    )
    return result
