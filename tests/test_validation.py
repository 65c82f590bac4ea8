import pytest

from miqat.prayer_times import PrayerTimeSet
from miqat.validation import is_valid_time, validate_prayer_times

VALID = {
    "Fajr": "05:00",
    "Sunrise": "06:15",
    "Dhuhr": "12:20",
    "Asr": "15:45",
    "Maghrib": "18:30",
    "Isha": "20:00",
}


def test_valid_mapping_and_set():
    assert validate_prayer_times(VALID)
    assert validate_prayer_times(PrayerTimeSet.from_mapping(VALID))


def test_extra_keys_are_ignored():
    assert validate_prayer_times({**VALID, "Midnight": "00:15", "Imsak": "04:50"})


@pytest.mark.parametrize("name, value", [
    ("Fajr", "5:00"),
    ("Fajr", "24:00"),
    ("Dhuhr", "12:60"),
    ("Isha", "20:00\n"),
    ("Isha", "20:00 (+03)"),
    ("Asr", None),
    ("Asr", 945),
])
def test_malformed_values(name, value):
    assert not validate_prayer_times({**VALID, name: value})


def test_missing_prayer():
    times = dict(VALID)
    del times["Maghrib"]
    assert not validate_prayer_times(times)


@pytest.mark.parametrize("name, value", [
    ("Sunrise", "04:59"),
    ("Asr", "12:20"),
    ("Isha", "18:30"),
])
def test_out_of_order_or_equal(name, value):
    assert not validate_prayer_times({**VALID, name: value})


@pytest.mark.parametrize("value", [None, "05:00", ["05:00"] * 6, 42])
def test_non_mappings_are_invalid(value):
    assert validate_prayer_times(value) is False


@pytest.mark.parametrize("value, expected", [
    ("00:00", True),
    ("23:59", True),
    ("19:05", True),
    ("7:05", False),
    ("07:5", False),
    ("ab:cd", False),
    (b"07:05", False),
])
def test_is_valid_time(value, expected):
    assert is_valid_time(value) is expected


def test_set_with_isha_after_midnight():
    times = PrayerTimeSet("01:10", "04:43", "13:03", "17:25", "21:22", "00:49", next_day=frozenset({"Isha"}))

    assert validate_prayer_times(times)
    # The clock strings alone carry no date, so the mapping reads as out of order
    assert not validate_prayer_times(times.as_dict())


def test_next_day_marker_does_not_hide_real_disorder():
    times = PrayerTimeSet("01:10", "04:43", "13:03", "17:25", "21:22", "00:49", next_day=frozenset({"Maghrib", "Isha"}))
    assert not validate_prayer_times(times)
