"""Demo data for the local SQLite backend.

Planting dates and alert times are relative to ``now`` so progress bars
look alive whenever the demo is started.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from werkzeug.security import generate_password_hash

from .models import HARVEST_READY, PLANTING_READY, PROGRESS_UPDATE, WEATHER_WARNING
from .store import ALERTS, CROPS, FARMER_CROPS, FARMERS, OFFICERS, WEATHER_DATA, SQLiteStore

log = logging.getLogger(__name__)

DEMO_OFFICER_EMAIL = "officer@agroalert.local"
DEMO_OFFICER_PASSWORD = "agroalert"

# Town -> (lat, lon)
KENYA_SITES = {
    "Nakuru": (-0.303, 36.080),
    "Eldoret": (0.514, 35.270),
    "Kisumu": (-0.092, 34.768),
    "Machakos": (-1.517, 37.263),
    "Meru": (0.047, 37.650),
}

CROPS_DEMO = [
    dict(id="crop-maize", name="Maize", planting_season="Long rains (Mar-May)", growth_days=120,
         water_requirements="500-800 mm per season"),
    dict(id="crop-beans", name="Beans", planting_season="Short rains (Oct-Dec)", growth_days=90,
         water_requirements="300-500 mm per season"),
    dict(id="crop-sorghum", name="Sorghum", planting_season="Long rains (Mar-May)", growth_days=110,
         water_requirements="450-650 mm per season"),
    dict(id="crop-kale", name="Sukuma Wiki", planting_season="All year (irrigated)", growth_days=60,
         water_requirements="Frequent light watering"),
    dict(id="crop-potato", name="Potatoes", planting_season="Long rains (Mar-May)", growth_days=100,
         water_requirements="500-700 mm per season"),
]

FARMERS_DEMO = [
    dict(id="farmer-001", name="Wanjiku Kamau", phone="+254712345001", location_name="Nakuru"),
    dict(id="farmer-002", name="Kiprono Cheruiyot", phone="+254712345002", location_name="Eldoret"),
    dict(id="farmer-003", name="Achieng Otieno", phone="+254712345003", location_name="Kisumu"),
    dict(id="farmer-004", name="Mutua Musyoka", phone="+254712345004", location_name="Machakos"),
    dict(id="farmer-005", name="Nkirote Mwenda", phone="+254712345005", location_name="Meru"),
]

# (farmer, crop, days since planting, hectares, status)
PLANTINGS_DEMO = [
    ("farmer-001", "crop-maize", 45, 2.0, "growing"),
    ("farmer-001", "crop-beans", 80, 0.5, "flowering"),
    ("farmer-002", "crop-maize", 118, 4.5, "maturing"),
    ("farmer-002", "crop-potato", 30, 1.2, "growing"),
    ("farmer-003", "crop-sorghum", 15, 1.0, "germinating"),
    ("farmer-004", "crop-beans", 95, 0.8, "harvest ready"),
    ("farmer-004", "crop-kale", 20, 0.3, "growing"),
    ("farmer-005", "crop-potato", 60, 1.5, "growing"),
]

# (farmer, type, hours ago, read, message)
ALERTS_DEMO = [
    ("farmer-001", PROGRESS_UPDATE, 3, False, "Your maize is 37% grown. Top-dress with CAN this week."),
    ("farmer-001", WEATHER_WARNING, 30, False, "Heavy rain (40 mm) expected in Nakuru tomorrow. Clear drainage channels."),
    ("farmer-001", PLANTING_READY, 24 * 50, True, "Soil moisture is good for planting maize in Nakuru."),
    ("farmer-002", HARVEST_READY, 5, False, "Your maize is nearly ready for harvest. Arrange storage and drying."),
    ("farmer-002", PROGRESS_UPDATE, 24 * 3, True, "Potatoes are 30% grown. Start earthing up."),
    ("farmer-003", PLANTING_READY, 24 * 16, True, "Long rains have started in Kisumu. Plant sorghum now."),
    ("farmer-004", HARVEST_READY, 24 * 2, False, "Beans are ready for harvest. Pick pods when dry."),
    ("farmer-004", WEATHER_WARNING, 24 * 9, True, "Dry spell expected in Machakos for 10 days. Mulch the kale beds."),
]

# location -> (temperature C, humidity %, rainfall mm, forecast)
WEATHER_DEMO = {
    "Nakuru": (22.4, 68, 12.5, "Partly cloudy with afternoon showers."),
    "Eldoret": (19.8, 72, 8.1, "Cool and overcast; light rain in the evening."),
    "Kisumu": (27.1, 64, 3.2, "Warm and humid; isolated thunderstorms possible."),
    "Machakos": (25.6, 45, 0.0, "Sunny and dry. No rain expected this week."),
}


def seed_demo(store: SQLiteStore, now: Optional[datetime] = None) -> bool:
    """Fill an empty store with demo records. Returns False if data already exists."""
    if store.count(FARMERS) > 0:
        return False
    now = now or datetime.now(timezone.utc)
    created = now.isoformat(timespec="seconds")

    store.insert_many(CROPS, CROPS_DEMO)
    store.insert_many(FARMERS, [
        dict(f, latitude=KENYA_SITES[f["location_name"]][0],
             longitude=KENYA_SITES[f["location_name"]][1], created_at=created)
        for f in FARMERS_DEMO
    ])
    store.insert_many(FARMER_CROPS, [
        dict(id=f"fc-{i:03d}", farmer_id=farmer, crop_id=crop,
             planting_date=(now - timedelta(days=days)).date().isoformat(),
             area_hectares=area, status=status)
        for i, (farmer, crop, days, area, status) in enumerate(PLANTINGS_DEMO, start=1)
    ])
    store.insert_many(ALERTS, [
        dict(id=f"alert-{i:03d}", farmer_id=farmer, alert_type=kind, message=message,
             sent_at=(now - timedelta(hours=hours)).isoformat(timespec="seconds"),
             is_read=int(read), dashboard_link=f"?farmer={farmer}")
        for i, (farmer, kind, hours, read, message) in enumerate(ALERTS_DEMO, start=1)
    ])
    # Meru has no weather row on purpose: its farmer sees no weather card
    store.insert_many(WEATHER_DATA, [
        dict(id=f"wx-{name.lower()}", location_name=name,
             latitude=KENYA_SITES[name][0], longitude=KENYA_SITES[name][1],
             temperature=t, humidity=h, rainfall=r, forecast=forecast, recorded_at=created)
        for name, (t, h, r, forecast) in WEATHER_DEMO.items()
    ])
    store.insert_many(OFFICERS, [
        dict(id="officer-001", name="Extension Officer", email=DEMO_OFFICER_EMAIL,
             region="Rift Valley", created_at=created,
             password_hash=generate_password_hash(DEMO_OFFICER_PASSWORD)),
    ])
    log.info("Seeded demo data into %s", store.db_file)
    return True
