"""Named failures raised by the engine."""


class MiqatError(Exception):
    """Base class for every error the engine raises."""


class InvalidCoordinate(MiqatError, ValueError):
    """Latitude or longitude outside its legal range."""


class UnknownMethod(MiqatError, ValueError):
    """Calculation method identifier not in the registry."""


class UnknownMadhab(MiqatError, ValueError):
    """Madhab identifier not in the registry."""


class UnknownTimezone(MiqatError, ValueError):
    """Timezone is neither a known IANA name nor a parsable UTC offset."""


class UnresolvableAngle(MiqatError, ArithmeticError):
    """The sun never reaches the requested altitude on that day."""

    def __init__(self, event: str, altitude: float, cos_hour_angle: float):
        self.event = event
        self.altitude = altitude
        self.cos_hour_angle = cos_hour_angle
        super().__init__(
            f"{event}: sun does not reach {altitude:g} deg on this date "
            f"(cos H = {cos_hour_angle:.3f})"
        )


class InvalidComputation(MiqatError, ArithmeticError):
    """Computed prayer times are not in chronological order."""


class CalendarUnavailable(MiqatError, LookupError):
    """A Hijri calendar source cannot convert the requested date."""


class RamadanUnresolvable(MiqatError, LookupError):
    """No probed Hijri year produced a usable Ramadan window."""


class InvalidRemoteResponse(MiqatError, ValueError):
    """A remote prayer-time or calendar payload has an unexpected shape."""
