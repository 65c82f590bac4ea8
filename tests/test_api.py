import pytest
from fastapi.testclient import TestClient

from index import app
from miqat.validation import validate_prayer_times

MAKKAH = {"latitude": 21.4225, "longitude": 39.8262}


@pytest.fixture
def client():
    return TestClient(app)


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "/api/prayertimes" in response.json()["endpoints"]


def test_times_for_gps(client):
    response = client.get("/api/timesForGPS", params={
        "lat": 21.4225, "lng": 39.8262, "date": "2024-03-15", "days": 2,
        "timezoneOffset": 180, "calculationMethod": "Makkah",
    })

    assert response.status_code == 200
    times = response.json()["times"]
    assert list(times) == ["2024-03-15", "2024-03-16"]
    assert all(len(day) == 6 for day in times.values())


def test_times_for_gps_rejects_bad_date(client):
    response = client.get("/api/timesForGPS", params={"lat": 0, "lng": 0, "date": "15-03-2024"})
    assert response.status_code == 400


def test_prayer_times_aladhan_shape(client):
    response = client.get("/api/prayertimes", params={
        **MAKKAH, "method": "4", "date": "15-03-2024", "timezone": "Asia/Riyadh",
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert validate_prayer_times(data["timings"])
    assert data["meta"]["method"]["id"] == 4
    assert data["meta"]["offsetMinutes"] == 180
    assert data["date"]["gregorian"]["date"] == "15-03-2024"
    assert data["date"]["hijri"]["month"] == 9
    assert data["date"]["hijri"]["year"] == 1445


@pytest.mark.parametrize("params, status, kind", [
    ({"latitude": 91, "longitude": 0}, 400, "InvalidCoordinate"),
    ({**MAKKAH, "method": "Diyanet"}, 400, "UnknownMethod"),
    ({**MAKKAH, "school": "Zahiri"}, 400, "UnknownMadhab"),
    ({**MAKKAH, "timezone": "Mars/Olympus_Mons"}, 400, "UnknownTimezone"),
    ({"latitude": 85, "longitude": 0, "method": "MWL", "date": "15-03-2024"}, 422, "UnresolvableAngle"),
])
def test_prayer_times_errors(client, params, status, kind):
    response = client.get("/api/prayertimes", params=params)

    assert response.status_code == status
    assert response.json()["kind"] == kind


def test_next_prayer_after_isha_during_ramadan(client):
    response = client.get("/api/nextPrayer", params={
        **MAKKAH, "timezone": "Asia/Riyadh", "now": "2024-03-15T23:50:00",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["nextPrayer"]["name"] == "Fajr"
    assert body["nextPrayer"]["isTomorrow"] is True
    assert body["fasting"]["nextEvent"] == "suhoor"


def test_next_prayer_outside_ramadan_has_no_fasting(client):
    response = client.get("/api/nextPrayer", params={
        **MAKKAH, "timezone": "Asia/Riyadh", "now": "2024-06-01T12:00:00",
    })

    assert response.status_code == 200
    assert "fasting" not in response.json()


def test_hijri_during_ramadan(client):
    response = client.get("/api/hijri", params={"date": "2025-03-10", "offset": 0})

    assert response.status_code == 200
    body = response.json()
    assert body["isRamadan"] is True
    assert body["currentRamadanDay"] == 10
    assert body["daysUntilRamadan"] is None
    assert body["ramadanStart"] == "2025-03-01"


def test_hijri_offset_out_of_range(client):
    assert client.get("/api/hijri", params={"offset": 45}).status_code == 422


def test_convert_both_directions(client):
    to_hijri = client.get("/api/calendar/convert", params={"date": "01-03-2025"}).json()
    assert to_hijri["data"]["hijri"]["date"] == "01-09-1446"
    assert to_hijri["data"]["hijri"]["monthName"] == "Ramadan"

    to_gregorian = client.get("/api/calendar/convert", params={"date": "01-09-1446", "direction": "hToG"}).json()
    assert to_gregorian["data"]["gregorian"]["date"] == "01-03-2025"


@pytest.mark.parametrize("params", [
    {"date": "01-03-2025", "direction": "sideways"},
    {"date": "2025-03-01"},
    {"date": "31-13-1446", "direction": "hToG"},
    {"date": "garbage", "direction": "hToG"},
])
def test_convert_rejects_bad_input(client, params):
    assert client.get("/api/calendar/convert", params=params).status_code == 400


def test_hijri_month(client):
    response = client.get("/api/calendar/hijri-month", params={"month": 9, "year": 1446})

    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["daysInMonth"] in (29, 30)
    assert body["data"][0]["gregorian"]["date"] == "01-03-2025"
    assert body["data"][-1]["hijri"]["day"] == body["meta"]["daysInMonth"]


def test_hijri_month_out_of_range(client):
    assert client.get("/api/calendar/hijri-month", params={"month": 13, "year": 1446}).status_code == 422


def test_qibla(client):
    response = client.get("/api/qibla", params={"latitude": 40.7128, "longitude": -74.0060})

    assert response.status_code == 200
    assert response.json()["data"]["compass"] == "NE"


def test_london_summer_isha_after_midnight(client):
    response = client.get("/api/prayertimes", params={
        "latitude": 51.5074, "longitude": -0.1278, "method": "ISNA",
        "date": "21-06-2024", "timezone": "Europe/London",
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["nextDay"] == ["Isha"]
    assert data["timings"]["Isha"].startswith("00:")
    assert data["meta"]["offsetMinutes"] == 60


def test_hijri_month_attaches_events(client):
    body = client.get("/api/calendar/hijri-month", params={"month": 9, "year": 1446}).json()

    assert body["meta"]["isSignificantMonth"] is True
    by_day = {day["hijri"]["day"]: [event["id"] for event in day["events"]] for day in body["data"]}
    assert by_day[1] == ["ramadan-begins"]
    assert by_day[27] == ["laylat-al-qadr"]
    assert by_day[2] == []


def test_hijri_month_school_filter(client):
    default = client.get("/api/calendar/hijri-month", params={"month": 12, "year": 1445}).json()
    shia = client.get("/api/calendar/hijri-month", params={"month": 12, "year": 1445, "schools": "shia"}).json()

    assert default["meta"]["isSignificantMonth"] is False
    assert default["data"][17]["events"] == []
    assert [event["id"] for event in shia["data"][17]["events"]] == ["eid-al-ghadir"]
    assert [event["id"] for event in shia["data"][9]["events"]] == ["eid-al-adha"]


def test_hijri_month_unknown_school(client):
    response = client.get("/api/calendar/hijri-month", params={"month": 1, "year": 1446, "schools": "zaidi"})
    assert response.status_code == 400
