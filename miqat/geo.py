import math
from dataclasses import dataclass

from .errors import InvalidCoordinate
from .solar import deg2rad, normalize_angle_360, rad2deg

KAABA_LAT = 21.4225
KAABA_LNG = 39.8262

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


@dataclass(frozen=True)
class GeoCoordinate:
    """A point on the globe; out-of-range values are rejected on construction."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        try:
            lat, lng = float(self.lat), float(self.lng)
        except (TypeError, ValueError) as exc:
            raise InvalidCoordinate(f"Coordinates must be numbers, got ({self.lat!r}, {self.lng!r})") from exc
        if not math.isfinite(lat) or not -90.0 <= lat <= 90.0:
            raise InvalidCoordinate(f"Invalid latitude {self.lat!r}. Must be between -90 and 90")
        if not math.isfinite(lng) or not -180.0 <= lng <= 180.0:
            raise InvalidCoordinate(f"Invalid longitude {self.lng!r}. Must be between -180 and 180")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)


@dataclass(frozen=True)
class Qibla:
    direction: float
    compass: str
    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "compass": self.compass,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


def bearing_to_compass(bearing: float) -> str:
    """Eight-point compass label for a bearing in degrees."""
    return COMPASS_POINTS[round(normalize_angle_360(bearing) / 45.0) % 8]


def qibla_direction(coord: GeoCoordinate) -> Qibla:
    """Initial great-circle bearing from `coord` to the Kaaba, clockwise from true north."""
    phi = deg2rad(coord.lat)
    phi_k = deg2rad(KAABA_LAT)
    delta = deg2rad(KAABA_LNG - coord.lng)
    bearing = rad2deg(math.atan2(
        math.sin(delta),
        math.cos(phi) * math.tan(phi_k) - math.sin(phi) * math.cos(delta),
    ))
    bearing = normalize_angle_360(bearing)
    return Qibla(
        direction=bearing,
        compass=bearing_to_compass(bearing),
        latitude=coord.lat,
        longitude=coord.lng,
    )
