import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from miqat import (
    PRAYER_NAMES,
    GeoCoordinate,
    HijriDate,
    HijriGregorianConverter,
    SchoolFilter,
    compute_prayer_times,
    get_madhab,
    get_method,
    important_dates_for_month,
    is_significant_month,
    next_fasting_event,
    next_prayer,
    qibla_direction,
    resolve_ramadan,
    utc_offset_minutes,
)
from miqat.config import load_settings
from miqat.errors import (
    CalendarUnavailable,
    InvalidComputation,
    InvalidCoordinate,
    MiqatError,
    RamadanUnresolvable,
    UnknownMadhab,
    UnknownMethod,
    UnknownTimezone,
    UnresolvableAngle,
)
from miqat.timezones import get_zone, parse_offset

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("miqat.api")

converter = HijriGregorianConverter.default()

app = FastAPI(
    title="Prayer Times API",
    description="API service for calculating Islamic prayer times and the Ramadan calendar",
    version="1.0.0"
)

# Most specific classes first
ERROR_STATUS = (
    (InvalidCoordinate, 400),
    (UnknownMethod, 400),
    (UnknownMadhab, 400),
    (UnknownTimezone, 400),
    (UnresolvableAngle, 422),
    (InvalidComputation, 500),
    (CalendarUnavailable, 503),
    (RamadanUnresolvable, 503),
)


@app.exception_handler(MiqatError)
async def engine_error(request: Request, exc: MiqatError):
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s failed: %s", request.url.path, exc)
    else:
        logger.info("%s rejected: %s", request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": str(exc), "kind": type(exc).__name__})


@app.get("/")
def root():
    return {
        "service": "Prayer Times API",
        "status": "online",
        "endpoints": {
            "/api/timesForGPS": "Get prayer times for GPS coordinates",
            "/api/prayertimes": "Get one day of prayer times in AlAdhan format",
            "/api/nextPrayer": "Get the next prayer and the countdown to it",
            "/api/hijri": "Get the current Hijri date and the next Ramadan",
            "/api/calendar/convert": "Convert a date between Gregorian and Hijri",
            "/api/calendar/hijri-month": "Get every day of a Hijri month with its notable events",
            "/api/qibla": "Get the Qibla direction"
        }
    }


def _parse_date(value: str, fmt: str, label: str) -> date:
    try:
        return datetime.strptime(value, fmt).date()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label}: {value!r}") from None


def _now_in(tz_name: str) -> datetime:
    offset = parse_offset(tz_name)
    if offset is None:
        return datetime.now(get_zone(tz_name))
    return datetime.now(timezone(timedelta(minutes=offset)))


def _gregorian_dict(day: date) -> dict:
    return {
        "date": day.strftime("%d-%m-%Y"),
        "day": day.day,
        "month": day.month,
        "year": day.year,
        "monthName": day.strftime("%B"),
        "weekday": day.strftime("%A"),
    }


def _hijri_dict(hijri: HijriDate) -> dict:
    return {
        "date": f"{hijri.day:02d}-{hijri.month:02d}-{hijri.year}",
        "day": hijri.day,
        "month": hijri.month,
        "year": hijri.year,
        "monthName": hijri.month_name,
    }


@app.get("/api/timesForGPS")
def get_times_for_gps(
    lat: float,
    lng: float,
    date: str,
    days: int = Query(1, ge=1, le=366),
    timezoneOffset: int = 0,  # Minutes east of UTC, e.g., 180
    timezone: Optional[str] = None,  # IANA name; overrides timezoneOffset per day
    calculationMethod: Optional[str] = None,
    madhab: Optional[str] = None,
):
    coord = GeoCoordinate(lat, lng)
    start_date = _parse_date(date, "%Y-%m-%d", "date (expected YYYY-MM-DD)")
    method = get_method(calculationMethod) if calculationMethod else settings.default_method
    school = get_madhab(madhab) if madhab else settings.default_madhab

    response_times = {}

    for i in range(days):
        current_day = start_date + timedelta(days=i)
        offset = utc_offset_minutes(timezone, current_day) if timezone else utc_offset_minutes(timezoneOffset, current_day)
        times = compute_prayer_times(coord, current_day, method, school, offset)

        # [0]: Fajr, [1]: Sunrise, [2]: Dhuhr, [3]: Asr, [4]: Maghrib, [5]: Isha
        response_times[current_day.isoformat()] = times.as_list()

    return {"times": response_times}


@app.get("/api/prayertimes")
def get_prayer_times(
    latitude: float,
    longitude: float,
    method: Optional[str] = None,
    school: Optional[str] = None,
    date: Optional[str] = None,  # DD-MM-YYYY
    timezone: Optional[str] = None,
):
    coord = GeoCoordinate(latitude, longitude)
    calc_method = get_method(method) if method else settings.default_method
    madhab = get_madhab(school) if school else settings.default_madhab
    tz_name = timezone or settings.default_timezone
    day = _parse_date(date, "%d-%m-%Y", "date (expected DD-MM-YYYY)") if date else _now_in(tz_name).date()

    offset = utc_offset_minutes(tz_name, day)
    times = compute_prayer_times(coord, day, calc_method, madhab, offset)
    hijri = converter.gregorian_to_hijri(day)

    return {
        "code": 200,
        "status": "OK",
        "source": "local",
        "data": {
            "timings": times.as_dict(),
            # Prayers whose clock time is on the following date
            "nextDay": [name for name in PRAYER_NAMES if name in times.next_day],
            "date": {
                "readable": day.strftime("%d %b %Y"),
                "gregorian": _gregorian_dict(day),
                "hijri": _hijri_dict(hijri),
            },
            "meta": {
                "latitude": coord.lat,
                "longitude": coord.lng,
                "timezone": tz_name,
                "offsetMinutes": offset,
                "method": {"id": calc_method.aladhan_id, "name": calc_method.name},
                "school": madhab.value,
            },
        },
    }


@app.get("/api/nextPrayer")
def get_next_prayer(
    latitude: float,
    longitude: float,
    method: Optional[str] = None,
    school: Optional[str] = None,
    timezone: Optional[str] = None,
    now: Optional[datetime] = None,  # ISO 8601 local wall-clock time; defaults to the clock
):
    coord = GeoCoordinate(latitude, longitude)
    calc_method = get_method(method) if method else settings.default_method
    madhab = get_madhab(school) if school else settings.default_madhab
    tz_name = timezone or settings.default_timezone
    current = now or _now_in(tz_name)

    today = current.date()
    tomorrow = today + timedelta(days=1)
    today_times = compute_prayer_times(coord, today, calc_method, madhab, utc_offset_minutes(tz_name, today))
    tomorrow_times = compute_prayer_times(coord, tomorrow, calc_method, madhab, utc_offset_minutes(tz_name, tomorrow))

    result = {
        "timings": today_times.as_dict(),
        "nextDay": [name for name in PRAYER_NAMES if name in today_times.next_day],
        "nextPrayer": next_prayer(today_times, current, tomorrow_times).to_dict(),
    }
    ramadan = resolve_ramadan(today, settings.hijri_offset_days, converter)
    if ramadan.status.is_ramadan:
        result["fasting"] = next_fasting_event(today_times, current, tomorrow_times).to_dict()
    return result


@app.get("/api/hijri")
def get_hijri(
    offset: Optional[int] = Query(None, ge=-30, le=30),
    date: Optional[str] = None,  # YYYY-MM-DD
):
    today = _parse_date(date, "%Y-%m-%d", "date (expected YYYY-MM-DD)") if date else _now_in(settings.default_timezone).date()
    hijri_offset = settings.hijri_offset_days if offset is None else offset
    return resolve_ramadan(today, hijri_offset, converter).to_dict()


@app.get("/api/calendar/convert")
def convert_date(
    date: str,  # DD-MM-YYYY
    direction: str = "gToH",
):
    if direction not in ("gToH", "hToG"):
        raise HTTPException(status_code=400, detail='Invalid direction. Must be "gToH" or "hToG"')

    if direction == "gToH":
        gregorian = _parse_date(date, "%d-%m-%Y", "date (expected DD-MM-YYYY)")
        hijri = converter.gregorian_to_hijri(gregorian)
    else:
        try:
            day, month, year = (int(part) for part in date.split("-"))
            hijri = HijriDate(day, month, year)
            gregorian = converter.hijri_to_gregorian(hijri)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid Hijri date {date!r}: {exc}") from None

    return {
        "code": 200,
        "status": "OK",
        "data": {
            "gregorian": _gregorian_dict(gregorian),
            "hijri": _hijri_dict(hijri),
        },
        "meta": {
            "inputDate": date,
            "direction": direction,
        },
    }


@app.get("/api/calendar/hijri-month")
def get_hijri_month(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1),
    schools: Optional[str] = None,
):
    try:
        filters = SchoolFilter.parse(schools)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    events = important_dates_for_month(month, filters)
    days = converter.hijri_month_to_gregorian_range(month, year)
    dates = [
        {
            "hijri": _hijri_dict(HijriDate(i + 1, month, year)),
            "gregorian": _gregorian_dict(day),
            "events": [event.to_dict() for event in events if event.day == i + 1],
        }
        for i, day in enumerate(days)
    ]
    return {
        "code": 200,
        "status": "OK",
        "data": dates,
        "meta": {
            "hijriMonth": month,
            "hijriYear": year,
            "daysInMonth": len(dates),
            "isSignificantMonth": is_significant_month(month),
        },
    }


@app.get("/api/qibla")
def get_qibla(latitude: float, longitude: float):
    return {
        "code": 200,
        "status": "OK",
        "data": qibla_direction(GeoCoordinate(latitude, longitude)).to_dict(),
    }
