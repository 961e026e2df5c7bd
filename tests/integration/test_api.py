import pytest
import requests
from fastapi.testclient import TestClient

from src.api.app import app, get_http_session, get_geocoder
from src.geocoding.nominatim import GeocodeCache, NominatimGeocoder

ENDPOINT = "/api/nbts-campaigns"


@pytest.fixture
def api(fake_session):
    cache = GeocodeCache()
    app.dependency_overrides[get_http_session] = lambda: fake_session
    app.dependency_overrides[get_geocoder] = lambda: NominatimGeocoder(cache, session=fake_session)
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.mark.integration
def test_unfiltered_listing_returns_every_row(api):
    response = api.get(ENDPOINT)

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "NBTS"
    assert body["total"] == 2
    assert [c["city"] for c in body["campaigns"]] == ["Colombo, Sri Lanka", "Kandy, Sri Lanka"]
    assert all("distanceKm" not in c for c in body["campaigns"])

@pytest.mark.integration
def test_record_shape_uses_camel_case_fields(api):
    campaign = api.get(ENDPOINT).json()["campaigns"][0]

    assert campaign == {
        "id": "nbts_0_20250110",
        "source": "NBTS",
        "date": "2025-01-10",
        "title": "Temple Campaign",
        "venue": "Gangaramaya",
        "bloodBank": "nbc",
        "city": "Colombo, Sri Lanka",
        "latitude": 6.9271,
        "longitude": 79.8612,
        "sourceUrl": "https://nbts.health.gov.lk/mobile/",
    }

@pytest.mark.integration
def test_distance_filter_keeps_only_nearby_campaign(api):
    response = api.get(ENDPOINT, params={"lat": 6.93, "lng": 79.86, "radius": 10})

    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 1
    assert body["campaigns"][0]["city"] == "Colombo, Sri Lanka"
    assert 0 <= body["campaigns"][0]["distanceKm"] <= 10

@pytest.mark.integration
def test_distance_filter_sorts_nearest_first(api):
    body = api.get(ENDPOINT, params={"lat": 7.29, "lng": 80.63, "radius": 500}).json()

    distances = [c["distanceKm"] for c in body["campaigns"]]
    assert [c["city"] for c in body["campaigns"]] == ["Kandy, Sri Lanka", "Colombo, Sri Lanka"]
    assert distances == sorted(distances)

@pytest.mark.integration
def test_default_radius_is_25_km(api):
    # Kandy is roughly 94 km from Colombo
    body = api.get(ENDPOINT, params={"lat": 6.9271, "lng": 79.8612}).json()

    assert body["total"] == 1

@pytest.mark.integration
def test_unresolved_campaign_only_in_unfiltered_listing(fake_session, api):
    fake_session.geocodes = {"Kandy, Sri Lanka": [{"lat": "7.2906", "lon": "80.6337"}]}

    unfiltered = api.get(ENDPOINT).json()
    filtered = api.get(ENDPOINT, params={"lat": 6.9271, "lng": 79.8612, "radius": 20000}).json()

    assert unfiltered["total"] == 2
    assert unfiltered["campaigns"][0]["latitude"] is None
    assert [c["city"] for c in filtered["campaigns"]] == ["Kandy, Sri Lanka"]

@pytest.mark.integration
def test_repeat_requests_hit_geocode_cache(fake_session, api):
    api.get(ENDPOINT)
    api.get(ENDPOINT)

    assert len(fake_session.geocode_calls()) == 2

@pytest.mark.integration
def test_upstream_failure_returns_500(fake_session, api):
    fake_session.page_error = requests.ConnectionError("upstream unreachable")

    response = api.get(ENDPOINT)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to parse NBTS campaigns",
        "details": "upstream unreachable",
    }

@pytest.mark.integration
def test_non_numeric_coordinates_are_rejected(api):
    assert api.get(ENDPOINT, params={"lat": "north"}).status_code == 422

@pytest.mark.integration
def test_responses_are_pretty_printed_with_cors(api):
    response = api.get(ENDPOINT, headers={"Origin": "https://example.org"})

    assert response.text.startswith('{\n  "source": "NBTS"')
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
def test_upstream_error_status_returns_500(fake_session, api):
    fake_session.page_status = 503

    response = api.get(ENDPOINT)

    assert response.status_code == 500
    assert response.json()["details"] == "503 Server Error"


@pytest.mark.integration
@pytest.mark.parametrize("params", [
    {"lat": "inf", "lng": "0"},
    {"lat": "nan", "lng": "0"},
    {"lat": "91", "lng": "79.86"},
    {"lat": "6.93", "lng": "-181"},
    {"lat": "6.93", "lng": "79.86", "radius": "-1"},
])
def test_out_of_range_query_is_a_validation_error(fake_session, api, params):
    response = api.get(ENDPOINT, params=params)

    assert response.status_code == 422
    assert "error" not in response.json()
    assert fake_session.calls == []


@pytest.mark.integration
def test_blank_coordinates_return_unfiltered_listing(api):
    response = api.get(ENDPOINT + "?lat=&lng=")

    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 2
    assert all("distanceKm" not in c for c in body["campaigns"])


@pytest.mark.integration
def test_blank_radius_falls_back_to_default(api):
    # Kandy is roughly 94 km from Colombo
    body = api.get(ENDPOINT + "?lat=6.9271&lng=79.8612&radius=").json()

    assert body["total"] == 1
    assert body["campaigns"][0]["city"] == "Colombo, Sri Lanka"


@pytest.mark.integration
def test_validation_errors_are_pretty_printed(api):
    response = api.get(ENDPOINT, params={"lat": "north"})

    assert response.status_code == 422
    assert response.text.startswith('{\n  "detail": [')
    assert response.json()["detail"][0]["loc"] == ["query", "lat"]
