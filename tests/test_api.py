from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from calastro.api.app import app

client = TestClient(app)


def _dt(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def test_positions_at_j2000():
    r = client.get("/api/v1/positions", params={"at": "2000-01-01T12:00:00+00:00"})
    assert r.status_code == 200
    body = r.json()
    assert body["moment"] == pytest.approx(730120.5)
    assert body["solar_longitude"] == pytest.approx(280.37, abs=0.02)
    assert body["ephemeris_correction_seconds"] == pytest.approx(63.86, abs=0.01)
    assert 0.0 <= body["lunar_phase"] < 360.0


@pytest.mark.parametrize("at", ["2000-01-01T12:00:00", "yesterday"])
def test_positions_rejects_bad_datetime(at):
    r = client.get("/api/v1/positions", params={"at": at})
    assert r.status_code == 422


def test_day_named_place():
    r = client.get("/api/v1/day", params={"date": "2000-06-21", "place": "greenwich"})
    assert r.status_code == 200
    body = r.json()
    assert body["place"]["name"] == "greenwich"
    rise = _dt(body["sun"]["sunrise"])
    fall = _dt(body["sun"]["sunset"])
    assert rise.hour == 3
    assert rise < fall
    assert _dt(body["sun"]["dawn"]) < rise
    assert list(body["crescent_visible"]) == ["shaukat"]


def test_day_coordinates_and_no_event_as_null():
    r = client.get(
        "/api/v1/day",
        params={"date": "2000-06-21", "lat": 80.0, "lon": 0.0, "utc_offset": 1},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["place"]["name"] is None
    assert body["place"]["utc_offset_hours"] == pytest.approx(1.0)
    assert body["sun"]["sunrise"] is None
    assert body["sun"]["sunset"] is None


@pytest.mark.parametrize("lat", [90.0, -90.0])
def test_day_at_the_poles(lat):
    r = client.get("/api/v1/day", params={"date": "2000-01-01", "lat": lat, "lon": 0.0})
    assert r.status_code == 200
    body = r.json()
    assert body["place"]["latitude"] == lat
    assert set(body["moon"]) == {"moonrise", "moonset", "moonlag_minutes"}


def test_day_standard_time_offset():
    r = client.get("/api/v1/day", params={"date": "2000-01-09", "place": "mecca", "criterion": "saudi"})
    assert r.status_code == 200
    body = r.json()
    assert body["sun"]["sunset"].endswith("+03:00")
    assert body["crescent_visible"] == {"saudi": True}
    assert body["moon"]["moonlag_minutes"] > 0


@pytest.mark.parametrize(
    "params",
    [
        {"date": "2000-13-01"},
        {"date": "2000-06-21", "place": "atlantis"},
        {"date": "2000-06-21", "lat": 10.0},
        {"date": "2000-06-21", "lat": 95.0, "lon": 0.0},
        {"date": "2000-06-21", "place": "mecca", "lat": 10.0, "lon": 0.0},
        {"date": "2000-06-21", "criterion": "naked_eye"},
    ],
)
def test_day_validation(params):
    r = client.get("/api/v1/day", params=params)
    assert r.status_code == 422


def test_year_catalogue():
    r = client.get("/api/v1/year", params={"year": 2000, "place": "mecca"})
    assert r.status_code == 200
    body = r.json()
    assert [e["name"] for e in body["seasons"]] == [
        "march_equinox",
        "june_solstice",
        "september_equinox",
        "december_solstice",
    ]
    assert len(body["solar_terms"]) == 24
    assert len(body["moon_phases"]) >= 48
    assert body["moon_phases"][0]["local"].endswith("+03:00")


def test_year_validation():
    assert client.get("/api/v1/year", params={"year": 1}).status_code == 422
    assert client.get("/api/v1/year", params={"year": 2000, "tz": "Mars/Olympus"}).status_code == 422


def test_places():
    r = client.get("/api/v1/places")
    assert r.status_code == 200
    assert "mecca" in r.json()
