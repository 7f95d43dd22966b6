from datetime import timedelta

import pytest

from agroalert.models import Alert, Farmer, FarmerCrop
from agroalert.presenters import (alert_style, alert_title, filter_farmers, format_coordinates,
                                  relative_time, total_area, unique_locations, unread_count)


@pytest.mark.parametrize("ago,expected", [
    (timedelta(minutes=30), "Just now"),
    (timedelta(hours=1), "1 hour ago"),
    (timedelta(hours=5, minutes=59), "5 hours ago"),
    (timedelta(hours=24), "1 day ago"),
    (timedelta(days=3, hours=2), "3 days ago"),
])
def test_relative_time(now, ago, expected):
    assert relative_time(now - ago, now) == expected


def test_relative_time_falls_back_to_date(now):
    assert relative_time(now - timedelta(days=8), now) == "Jun 22, 2024"
    assert relative_time(None, now) == ""


def test_alert_styling():
    assert alert_title("weather_warning") == "Weather Warning"
    assert alert_title("planting_ready") == "Planting Ready"
    assert alert_style("harvest_ready")[1] == "blue"
    assert alert_style("something_new") == alert_style("other")


def test_aggregates():
    crops = [FarmerCrop(id="1", farmer_id="f", crop_id="c", area_hectares=1.25),
             FarmerCrop(id="2", farmer_id="f", crop_id="c", area_hectares=0.5)]
    alerts = [Alert(id="a", farmer_id="f", alert_type="other", message="", is_read=True),
              Alert(id="b", farmer_id="f", alert_type="other", message="")]
    assert total_area(crops) == pytest.approx(1.75)
    assert f"{total_area(crops):.1f}" == "1.8"
    assert unread_count(alerts) == 1
    assert total_area([]) == 0


FARMERS = [
    Farmer(id="1", name="Wanjiku Kamau", location_name="Nakuru", latitude=-0.30312, longitude=36.08),
    Farmer(id="2", name="Achieng Otieno", location_name="Kisumu"),
    Farmer(id="3", name="Peter Njoroge", location_name="Nakuru"),
]


def test_unique_locations():
    assert unique_locations(FARMERS) == 2
    assert unique_locations([]) == 0


@pytest.mark.parametrize("term,ids", [
    ("", ["1", "2", "3"]),
    ("nakuru", ["1", "3"]),
    ("OTIENO", ["2"]),
    ("  kam ", ["1"]),
    ("eldoret", []),
])
def test_filter_farmers(term, ids):
    assert [f.id for f in filter_farmers(FARMERS, term)] == ids


def test_coordinates_to_four_places():
    assert format_coordinates(FARMERS[0]) == "-0.3031, 36.0800"
