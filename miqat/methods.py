"""
Calculation method registry and Asr (madhab) rules.

Angles are degrees below the horizon. Methods that define Isha (or Maghrib) as
a delay after sunset carry minutes instead of an angle.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from .errors import UnknownMadhab, UnknownMethod


class Method(str, Enum):
    MWL = "MWL"
    ISNA = "ISNA"
    EGYPTIAN = "Egyptian"
    MAKKAH = "Makkah"
    KARACHI = "Karachi"
    TEHRAN = "Tehran"
    JAFARI = "Jafari"


class Madhab(str, Enum):
    STANDARD = "Standard"
    HANAFI = "Hanafi"

    @property
    def asr_factor(self) -> int:
        """Shadow length multiplier used for Asr."""
        return 2 if self is Madhab.HANAFI else 1


@dataclass(frozen=True)
class CalculationMethod:
    id: Method
    name: str
    aladhan_id: int
    fajr_angle: float
    isha_angle: float | None = None
    isha_minutes: float | None = None
    maghrib_angle: float | None = None
    maghrib_minutes: float = 0.0

    def __post_init__(self) -> None:
        if (self.isha_angle is None) == (self.isha_minutes is None):
            raise ValueError(f"{self.id.value}: exactly one of isha_angle / isha_minutes is required")


METHODS: Mapping[Method, CalculationMethod] = MappingProxyType({
    Method.MWL: CalculationMethod(Method.MWL, "Muslim World League", 5, fajr_angle=18, isha_angle=17),
    Method.ISNA: CalculationMethod(Method.ISNA, "Islamic Society of North America", 2, fajr_angle=15, isha_angle=15),
    Method.EGYPTIAN: CalculationMethod(Method.EGYPTIAN, "Egyptian General Authority of Survey", 3, fajr_angle=19.5, isha_angle=17.5),
    Method.MAKKAH: CalculationMethod(Method.MAKKAH, "Umm al-Qura University, Makkah", 4, fajr_angle=18.5, isha_minutes=90),
    Method.KARACHI: CalculationMethod(Method.KARACHI, "University of Islamic Sciences, Karachi", 1, fajr_angle=18, isha_angle=18),
    Method.TEHRAN: CalculationMethod(
        Method.TEHRAN, "Institute of Geophysics, University of Tehran", 7,
        fajr_angle=17.7, isha_angle=14, maghrib_angle=4.5,
    ),
    Method.JAFARI: CalculationMethod(
        Method.JAFARI, "Shia Ithna-Ashari, Leva Institute, Qum", 0,
        fajr_angle=16, isha_angle=14, maghrib_angle=4,
    ),
})

_METHOD_ALIASES = {
    "egypt": Method.EGYPTIAN,
    "ummalqura": Method.MAKKAH,
    "muslimworldleague": Method.MWL,
}
_METHOD_BY_NAME = {m.value.lower(): m for m in Method}
_METHOD_BY_ALADHAN_ID = {str(c.aladhan_id): m for m, c in METHODS.items()}

_MADHAB_BY_NAME = {
    "standard": Madhab.STANDARD,
    "shafi": Madhab.STANDARD,
    "maliki": Madhab.STANDARD,
    "hanbali": Madhab.STANDARD,
    "hanafi": Madhab.HANAFI,
    "0": Madhab.STANDARD,
    "1": Madhab.HANAFI,
}

# Countries whose authorities follow Umm al-Qura
_UMM_AL_QURA_COUNTRIES = (
    "saudi arabia",
    "united arab emirates",
    "uae",
    "kuwait",
    "bahrain",
    "qatar",
    "oman",
)


def _squash(key: str) -> str:
    return "".join(ch for ch in key.lower() if ch.isalnum())


def get_method(identifier: "Method | CalculationMethod | str | int") -> CalculationMethod:
    """
    Look up a calculation method.

    Accepts a `Method`, an already resolved `CalculationMethod`, a method name
    (case-insensitive, common aliases included) or an AlAdhan numeric id.
    """
    if isinstance(identifier, CalculationMethod):
        return identifier
    if isinstance(identifier, Method):
        return METHODS[identifier]
    key = str(identifier).strip()
    method = (
        _METHOD_BY_ALADHAN_ID.get(key)
        or _METHOD_BY_NAME.get(key.lower())
        or _METHOD_ALIASES.get(_squash(key))
    )
    if method is None:
        raise UnknownMethod(f"Unknown calculation method: {identifier!r}")
    return METHODS[method]


def get_madhab(identifier: "Madhab | str | int") -> Madhab:
    """Look up a madhab by enum, school name or AlAdhan school id."""
    if isinstance(identifier, Madhab):
        return identifier
    madhab = _MADHAB_BY_NAME.get(str(identifier).strip().lower())
    if madhab is None:
        raise UnknownMadhab(f"Unknown madhab: {identifier!r}")
    return madhab


def country_from_label(label: str | None) -> str | None:
    """Last component of a "City, State, Country" label."""
    if not label:
        return None
    parts = [p.strip() for p in label.split(",") if p.strip()]
    if len(parts) < 2:
        return None
    return parts[-1]


def default_method_for_country(country: str | None) -> CalculationMethod:
    """Umm al-Qura for the Gulf states, ISNA everywhere else."""
    if country:
        normalized = country.lower()
        if any(c in normalized for c in _UMM_AL_QURA_COUNTRIES):
            return METHODS[Method.MAKKAH]
    return METHODS[Method.ISNA]
