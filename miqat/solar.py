"""
Low-precision solar ephemeris (USNO approximate solar coordinates).

Accurate to about a minute of time for civil use between 1900 and 2100; other
dates still compute, with decreasing accuracy.

The angle and calendar helpers (deg2rad, rad2deg, the normalizers and
julian_date) are public because the Qibla bearing in geo and the hour-angle
solver in prayer_times work in the same units.
"""

import math
from dataclasses import dataclass
from datetime import date

J2000 = 2451545.0


def deg2rad(d: float) -> float:
    return d * math.pi / 180.0


def rad2deg(r: float) -> float:
    return r * 180.0 / math.pi


def normalize_angle_360(degrees: float) -> float:
    """Normalize angle to [0, 360)."""
    return degrees - 360.0 * math.floor(degrees / 360.0)


def normalize_hour_24(hours: float) -> float:
    """Normalize hour to [0, 24)."""
    return hours - 24.0 * math.floor(hours / 24.0)


def julian_date(year: int, month: int, day: int, hour_utc: float = 0.0) -> float:
    """Julian date at the given UTC hour (midnight by default)."""
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
    return jd + hour_utc / 24.0


@dataclass(frozen=True)
class SolarPosition:
    declination: float
    """Degrees, positive north."""
    equation_of_time: float
    """Minutes, apparent minus mean solar time."""

    @property
    def equation_of_time_hours(self) -> float:
        return self.equation_of_time / 60.0


def sun_position(jd: float) -> SolarPosition:
    """Declination and equation of time at Julian date `jd`."""
    d = jd - J2000
    g = normalize_angle_360(357.529 + 0.98560028 * d)
    q = normalize_angle_360(280.459 + 0.98564736 * d)
    lon = normalize_angle_360(q + 1.915 * math.sin(deg2rad(g)) + 0.020 * math.sin(deg2rad(2 * g)))
    e = 23.439 - 0.00000036 * d

    # Right ascension, same quadrant as the ecliptic longitude
    sin_l = math.sin(deg2rad(lon))
    ra_hours = normalize_hour_24(
        rad2deg(math.atan2(math.cos(deg2rad(e)) * sin_l, math.cos(deg2rad(lon)))) / 15.0
    )

    eqt = q / 15.0 - ra_hours
    # Keep the difference near zero when q and RA straddle 0h
    if eqt > 12.0:
        eqt -= 24.0
    elif eqt < -12.0:
        eqt += 24.0

    decl = rad2deg(math.asin(math.sin(deg2rad(e)) * sin_l))
    return SolarPosition(declination=decl, equation_of_time=eqt * 60.0)


def solar_position_for_date(day: date, hour_utc: float = 12.0) -> SolarPosition:
    """Sun position for a calendar date, at noon UTC unless told otherwise."""
    return sun_position(julian_date(day.year, day.month, day.day, hour_utc))
