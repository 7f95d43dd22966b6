from agroalert.loaders import (EMPTY, ERROR, SUCCESS, load_alerts, load_farmer_dashboard,
                               load_farmer_details, load_farmer_directory, load_portal_overview,
                               load_weather_for)
from agroalert.store import FARMERS

from .conftest import RowsStore


def test_directory_is_sorted_by_name(store):
    result = load_farmer_directory(store)
    assert result.status == SUCCESS
    names = [f.name for f in result.data]
    assert names == sorted(names)
    assert len(names) == 5


def test_empty_directory_is_empty_not_error(empty_store):
    result = load_farmer_directory(empty_store)
    assert result.status == EMPTY
    assert result.data == []
    assert result.ok
    assert result.is_empty


def test_dashboard_loads_every_part(store, now):
    data = load_farmer_dashboard(store, "farmer-001")
    assert data.farmer.data.name == "Wanjiku Kamau"
    assert data.weather.data.location_name == "Nakuru"
    assert {c.crop_name for c in data.crops.data} == {"Maize", "Beans"}
    assert all(c.crop is not None for c in data.crops.data)
    sent = [a.sent_at for a in data.alerts.data]
    assert sent == sorted(sent, reverse=True)
    assert data.errors == []


def test_dashboard_alerts_are_limited(store):
    data = load_farmer_dashboard(store, "farmer-001", alert_limit=2)
    assert len(data.alerts.data) == 2
    assert data.alerts.data[0].message.startswith("Your maize is 37%")


def test_location_without_weather_shows_none(store):
    data = load_farmer_dashboard(store, "farmer-005")
    assert data.farmer.status == SUCCESS
    assert data.weather.status == EMPTY
    assert data.weather.data is None


def test_weather_match_is_exact_string(store):
    assert load_weather_for(store, "Nakuru").status == SUCCESS
    assert load_weather_for(store, "nakuru").data is None
    assert load_weather_for(store, "Nakuru ").data is None


def test_unknown_farmer(store):
    data = load_farmer_dashboard(store, "nobody")
    assert data.farmer.status == EMPTY
    assert data.farmer.data is None
    assert data.weather.data is None
    assert data.crops.data == []
    assert data.alerts.data == []


def test_failures_degrade_to_empty_collections(broken_store):
    data = load_farmer_dashboard(broken_store, "farmer-001")
    assert data.farmer.status == ERROR
    assert data.crops.status == ERROR and data.crops.data == []
    assert data.alerts.status == ERROR and data.alerts.data == []
    assert "connection refused" in data.crops.error
    assert len(data.errors) == 3

    portal = load_portal_overview(broken_store)
    assert portal.farmers.data == [] and portal.farmers.status == ERROR
    assert portal.weather.data == [] and portal.weather.status == ERROR

    details = load_farmer_details(broken_store, "farmer-001")
    assert details.crops.data == [] and details.alerts.data == []
    assert len(details.errors) == 2


def test_failure_is_logged(broken_store, caplog):
    with caplog.at_level("ERROR", logger="agroalert.loaders"):
        load_farmer_directory(broken_store)
    assert "Error loading farmers" in caplog.text


def test_malformed_rows_are_a_load_error():
    store = RowsStore({FARMERS: [{"name": "No id"}]})
    result = load_farmer_directory(store)
    assert result.status == ERROR
    assert result.data == []


def test_portal_overview(store):
    portal = load_portal_overview(store)
    assert len(portal.farmers.data) == 5
    assert {w.location_name for w in portal.weather.data} == {"Nakuru", "Eldoret", "Kisumu", "Machakos"}


def test_farmer_details_has_full_alert_history(store):
    details = load_farmer_details(store, "farmer-001")
    assert len(details.alerts.data) == 3
    assert len(details.crops.data) == 2
    assert details.errors == []


def test_alerts_without_limit(store):
    assert len(load_alerts(store, "farmer-002").data) == 2
