from datetime import date, datetime, timedelta

import pytest

from miqat.errors import CalendarUnavailable, RamadanUnresolvable
from miqat.hijri import HijriDate, HijriGregorianConverter, TabularCalendar
from miqat.ramadan import RamadanStatus, RamadanWindow, resolve_ramadan


class RecordingCalendar(TabularCalendar):
    """Tabular calendar that records probed Ramadan years and can refuse some."""

    name = "recording"

    def __init__(self, unavailable=()):
        self.unavailable = set(unavailable)
        self.probed = []

    def month_range(self, month, year):
        self.probed.append(year)
        if year in self.unavailable:
            raise CalendarUnavailable(f"no data for {year}")
        return super().month_range(month, year)


class BrokenCalendar(TabularCalendar):
    name = "broken"

    def to_hijri(self, day):
        raise CalendarUnavailable("offline")


def test_during_ramadan():
    result = resolve_ramadan(date(2025, 3, 10))

    assert result.status == RamadanStatus(True, None, 10)
    assert result.window.hijri_year == 1446
    assert result.window.start_date == date(2025, 3, 1)
    assert result.current_hijri == HijriDate(10, 9, 1446)


def test_before_ramadan():
    result = resolve_ramadan(date(2025, 2, 10))

    assert result.status.is_ramadan is False
    assert result.status.days_until_ramadan == 19
    assert result.status.current_ramadan_day is None


def test_after_ramadan_moves_to_next_year():
    today = date(2025, 4, 10)
    result = resolve_ramadan(today)

    assert result.window.hijri_year == 1447
    assert result.window.start_date == date(2026, 2, 18)
    assert result.status.days_until_ramadan == (date(2026, 2, 18) - today).days


def test_first_and_last_day_of_ramadan():
    window = resolve_ramadan(date(2025, 3, 1)).window
    first = resolve_ramadan(window.start_date)
    last = resolve_ramadan(window.end_date)
    after = resolve_ramadan(window.end_date + timedelta(days=1))

    assert first.status.current_ramadan_day == 1
    assert last.status.current_ramadan_day == window.days
    assert after.window.hijri_year == window.hijri_year + 1
    assert after.status.is_ramadan is False


def test_status_fields_are_exclusive_over_a_decade():
    day = date(2020, 1, 1)
    while day.year < 2031:
        result = resolve_ramadan(day)
        status = result.status
        assert (status.days_until_ramadan is None) != (status.current_ramadan_day is None)
        assert status.is_ramadan == (status.current_ramadan_day is not None)
        assert result.window.end_date >= day
        assert result.window.days in (29, 30)
        if status.is_ramadan:
            assert 1 <= status.current_ramadan_day <= result.window.days
        else:
            assert status.days_until_ramadan > 0
        day += timedelta(days=11)


def test_accepts_datetime():
    assert resolve_ramadan(datetime(2025, 3, 10, 22, 30)).status.current_ramadan_day == 10


def test_offset_moves_current_date_and_search_year():
    converter = HijriGregorianConverter(TabularCalendar())
    eve_of_new_year = converter.hijri_to_gregorian(HijriDate(29, 12, 1446))

    plain = resolve_ramadan(eve_of_new_year, 0, converter)
    shifted = resolve_ramadan(eve_of_new_year, 1, converter)

    assert plain.current_hijri == HijriDate(29, 12, 1446)
    assert shifted.current_hijri == HijriDate(1, 1, 1447)
    assert shifted.window == plain.window
    assert shifted.window.hijri_year == 1447


def test_offset_does_not_move_the_window():
    converter = HijriGregorianConverter(TabularCalendar())
    first_day = converter.hijri_to_gregorian(HijriDate(1, 9, 1446))

    result = resolve_ramadan(first_day, -1, converter)

    assert result.current_hijri == HijriDate(29, 8, 1446)
    assert result.status.current_ramadan_day == 1


def test_probing_stops_at_first_usable_year():
    calendar = RecordingCalendar()
    resolve_ramadan(date(2025, 2, 10), converter=HijriGregorianConverter(calendar))
    assert calendar.probed == [1446]


def test_unavailable_year_is_skipped():
    calendar = RecordingCalendar(unavailable={1446})
    result = resolve_ramadan(date(2025, 2, 10), converter=HijriGregorianConverter(calendar))

    assert calendar.probed == [1446, 1447]
    assert result.window.hijri_year == 1447


def test_no_usable_year():
    calendar = RecordingCalendar(unavailable={1446, 1447, 1448})
    with pytest.raises(RamadanUnresolvable):
        resolve_ramadan(date(2025, 2, 10), converter=HijriGregorianConverter(calendar))
    assert calendar.probed == [1446, 1447, 1448]


def test_current_date_unavailable():
    with pytest.raises(RamadanUnresolvable):
        resolve_ramadan(date(2025, 2, 10), converter=HijriGregorianConverter(BrokenCalendar()))


def test_window_rejects_reversed_dates():
    with pytest.raises(ValueError):
        RamadanWindow(1446, date(2025, 3, 30), date(2025, 3, 1))


def test_to_dict_shape():
    payload = resolve_ramadan(date(2025, 2, 10)).to_dict()
    assert payload == {
        "currentHijri": payload["currentHijri"],
        "ramadanStart": "2025-03-01",
        "ramadanEnd": payload["ramadanEnd"],
        "daysUntilRamadan": 19,
        "isRamadan": False,
        "currentRamadanDay": None,
        "ramadanHijriYear": 1446,
    }
    assert payload["currentHijri"]["month"] == 8
