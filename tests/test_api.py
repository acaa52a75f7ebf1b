import pytest
from fastapi.testclient import TestClient

from roadtrip.main import create_app


def _city(sid: str, name: str, lat: float, lon: float, state: str, **extra) -> dict:
    return {
        "id": sid,
        "name": name,
        "category": "destination_city",
        "latitude": lat,
        "longitude": lon,
        "state": state,
        "is_major_stop": True,
        **extra,
    }


CHICAGO = _city("chi", "Chicago", 41.8781, -87.6298, "IL")
SANTA_MONICA = _city("sm", "Santa Monica", 34.0195, -118.4912, "CA")
CANDIDATES = [
    _city("stl", "St. Louis", 38.6270, -90.1994, "MO"),
    _city("okc", "Oklahoma City", 35.4676, -97.5164, "OK"),
    _city("ama", "Amarillo", 35.2220, -101.8313, "TX"),
    _city("abq", "Albuquerque", 35.0844, -106.6504, "NM"),
    _city("flg", "Flagstaff", 35.1983, -111.6513, "AZ"),
    _city("zero", "Placeholder", 0.0, 0.0, "OK"),
]


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_plan_endpoint(api_client: TestClient):
    request = {
        "start": CHICAGO,
        "end": SANTA_MONICA,
        "candidates": CANDIDATES,
        "requested_days": 6,
        "include_csv": True,
    }

    response = api_client.post("/api/trips/plan", json=request)

    assert response.status_code == 200
    payload = response.json()
    assert [stop["id"] for stop in payload["destinations"]] == ["stl", "okc", "ama", "abq", "flg"]
    assert len(payload["segments"]) == 6
    assert payload["trip_style"] == "destination-focused"
    assert any(violation["day"] == 2 for violation in payload["violations"])
    assert payload["csv"].startswith("day,start,end")
    assert payload["heritage_summary"]["high_heritage_count"] == 3
    assert all(segment["attractions"] == [] for segment in payload["segments"])


def test_plan_endpoint_returns_segment_attractions(api_client: TestClient):
    caverns = {
        "id": "cav",
        "name": "Meramec Caverns",
        "category": "attraction",
        "latitude": 38.2064,
        "longitude": -91.0918,
    }
    request = {
        "start": CANDIDATES[0],
        "end": CANDIDATES[1],
        "candidates": [caverns],
        "requested_days": 2,
    }

    response = api_client.post("/api/trips/plan", json=request)

    assert response.status_code == 200
    segments = response.json()["segments"]
    assert [stop["id"] for stop in segments[0]["attractions"]] == ["cav"]


def test_plan_endpoint_rejects_unusable_start(api_client: TestClient):
    request = {
        "start": _city("bad", "Nowhere", 0.0, 0.0, "IL"),
        "end": SANTA_MONICA,
        "candidates": CANDIDATES,
        "requested_days": 4,
    }

    response = api_client.post("/api/trips/plan", json=request)

    assert response.status_code == 422
    assert "invalid coordinates" in response.json()["detail"]


def test_plan_endpoint_validates_days(api_client: TestClient):
    request = {"start": CHICAGO, "end": SANTA_MONICA, "requested_days": 0}
    assert api_client.post("/api/trips/plan", json=request).status_code == 422


def test_plan_endpoint_maps_unexpected_errors(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from roadtrip.api.routes import trips

    def boom(payload):
        raise RuntimeError("selector exploded")

    monkeypatch.setattr(trips, "plan_trip", boom)

    response = api_client.post(
        "/api/trips/plan",
        json={"start": CHICAGO, "end": SANTA_MONICA, "requested_days": 3},
    )

    assert response.status_code == 500
    assert "selector exploded" in response.json()["detail"]


def test_plan_endpoint_maps_value_errors(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from roadtrip.api.routes import trips

    def reject(payload):
        raise ValueError("bad request")

    monkeypatch.setattr(trips, "plan_trip", reject)

    response = api_client.post(
        "/api/trips/plan",
        json={"start": CHICAGO, "end": SANTA_MONICA, "requested_days": 3},
    )

    assert response.status_code == 400


def test_balance_endpoint(api_client: TestClient):
    request = {"start": CHICAGO, "end": SANTA_MONICA, "candidates": CANDIDATES, "requested_days": 6}

    response = api_client.post("/api/trips/balance", json=request)

    assert response.status_code == 200
    payload = response.json()
    assert payload["has_progressive_flow"] is True
    assert "zero" not in [stop["id"] for stop in payload["destinations"]]
    assert len(payload["daily_hours"]) == len(payload["destinations"]) + 1
    assert payload["report"]["grade"] in {"A", "B", "C", "D", "F"}


def test_duration_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/trips/duration",
        json={"start": CHICAGO, "end": SANTA_MONICA, "requested_days": 2},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["suggested_days"] >= 6
    assert payload["constraints"]["is_valid"] is False
    assert len(payload["daily_targets"]) == payload["suggested_days"]
