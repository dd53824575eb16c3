from starlette.testclient import TestClient

from geoproximity.api.app import app
from geoproximity.config.settings import get_settings


def _reference_reading(accuracy: float = 10.0) -> dict:
    ref = get_settings().proximity.reference
    return {"lat": ref.lat, "lon": ref.lon, "accuracy": accuracy}


def test_api_proximity_reading_at_reference():
    payload = {"outcome": {"status": "ok", "reading": _reference_reading()}}

    with TestClient(app) as c:
        resp = c.post("/api/proximity", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"]["kind"] == "at_location"
    assert data["result"]["distance_m"] == 0
    assert data["messages"][-1] == "You are in Conestoga College, Kitchener, ON."
    assert "You are in Conestoga College, Kitchener, ON." in data["html"]


def test_api_proximity_far_reading_is_away():
    payload = {"outcome": {"status": "ok", "reading": {"lat": 43.6532, "lon": -79.3832, "accuracy": 25}}}

    with TestClient(app) as c:
        resp = c.post("/api/proximity", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"]["kind"] == "away"
    assert data["result"]["distance_km"] > 50
    assert data["messages"][-1].endswith(" km from Conestoga College, Kitchener, ON.")


def test_api_proximity_request_threshold_widens_window():
    # ~14 km away: outside the default window, inside a 20 km one.
    reading = {"lat": 43.473274576043096, "lon": -80.54450511932373, "accuracy": 0}

    with TestClient(app) as c:
        default = c.post("/api/proximity", json={"outcome": {"status": "ok", "reading": reading}})
        widened = c.post(
            "/api/proximity",
            json={"outcome": {"status": "ok", "reading": reading}, "threshold_m": 20_000},
        )
        negative = c.post(
            "/api/proximity",
            json={"outcome": {"status": "ok", "reading": reading}, "threshold_m": -1},
        )
    assert default.json()["result"]["kind"] == "away"
    assert widened.json()["result"]["kind"] == "at_location"
    assert negative.status_code == 422


def test_api_proximity_error_outcome():
    payload = {"outcome": {"status": "error", "error": {"code": 1, "message": "User denied Geolocation"}}}

    with TestClient(app) as c:
        resp = c.post("/api/proximity", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"] is None
    assert data["messages"] == ["Error: PERMISSION DENIED: User denied Geolocation"]
    assert "class='red'" in data["html"]


def test_api_proximity_rejects_unknown_request_fields():
    # Only the outcome and the threshold are tunable per request; anything else
    # (e.g. acquisition options, which the server never uses) is refused.
    for extra in (
        {"settings_overrides": {"proximity": {"threshold_m": 20_000}}},
        {"position_options": {"timeout_ms": 1}},
    ):
        payload = {"outcome": {"status": "ok", "reading": _reference_reading()}, **extra}

        with TestClient(app) as c:
            resp = c.post("/api/proximity", json=payload)
        assert resp.status_code == 422


def test_api_proximity_rejects_out_of_range_reading():
    payload = {"outcome": {"status": "ok", "reading": {"lat": 95, "lon": 0, "accuracy": 1}}}

    with TestClient(app) as c:
        resp = c.post("/api/proximity", json=payload)
    assert resp.status_code == 422


def test_api_distance():
    payload = {"current": {"lat": 0, "lon": 0}, "target": {"lat": 0, "lon": 1}}

    with TestClient(app) as c:
        resp = c.post("/api/distance", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["distance_m"] == 111_319
    assert 111_319 <= data["exact_m"] < 111_320


def test_api_reference_and_settings():
    with TestClient(app) as c:
        ref = c.get("/api/reference").json()
        public = c.get("/api/settings").json()
    assert ref["reference"]["name"] == "Conestoga College, Kitchener, ON"
    assert ref["threshold_m"] == 1000
    assert public["position_options"]["timeout_ms"] == 60000
    assert "ip_lookup" not in public


def test_index_page_runs_browser_geolocation():
    with TestClient(app) as c:
        resp = c.get("/")
    assert resp.status_code == 200
    assert "navigator.geolocation.getCurrentPosition" in resp.text
    assert "timeout: 60000" in resp.text
