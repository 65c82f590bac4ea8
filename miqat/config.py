"""
Service defaults, read from the environment.

    MIQAT_DEFAULT_METHOD      calculation method when a request has none (Makkah)
    MIQAT_DEFAULT_MADHAB      Asr rule when a request has none (Standard)
    MIQAT_HIJRI_OFFSET_DAYS   moon-sighting offset for Hijri dates (0)
    MIQAT_DEFAULT_TIMEZONE    zone used when a request has none (UTC)
    MIQAT_LOG_LEVEL           log level of the HTTP app (INFO)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .methods import CalculationMethod, Madhab, get_madhab, get_method
from .timezones import parse_offset, get_zone

ENV_PREFIX = "MIQAT_"


@dataclass(frozen=True)
class Settings:
    default_method: CalculationMethod
    default_madhab: Madhab
    hijri_offset_days: int = 0
    default_timezone: str = "UTC"
    log_level: str = "INFO"


def _int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ

    def get(name: str, default: str) -> str:
        return env.get(ENV_PREFIX + name, default).strip() or default

    log_level = get("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a log level: {log_level!r}")

    timezone = get("DEFAULT_TIMEZONE", "UTC")
    if parse_offset(timezone) is None:
        get_zone(timezone)

    return Settings(
        default_method=get_method(get("DEFAULT_METHOD", "Makkah")),
        default_madhab=get_madhab(get("DEFAULT_MADHAB", "Standard")),
        hijri_offset_days=_int(get("HIJRI_OFFSET_DAYS", "0"), "HIJRI_OFFSET_DAYS"),
        default_timezone=timezone,
        log_level=log_level,
    )
