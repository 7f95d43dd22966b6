from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

# ------------------------------
# Alert types
# ------------------------------
PLANTING_READY = "planting_ready"
WEATHER_WARNING = "weather_warning"
HARVEST_READY = "harvest_ready"
PROGRESS_UPDATE = "progress_update"
OTHER = "other"

ALERT_TYPES = (PLANTING_READY, WEATHER_WARNING, HARVEST_READY, PROGRESS_UPDATE, OTHER)


# ------------------------------
# Row parsing helpers
# ------------------------------

def parse_datetime(value: Any) -> Optional[datetime]:
    """ISO-8601 string (a trailing Z is accepted) -> datetime. Naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) > 10:
        return parse_datetime(text).date()
    return date.fromisoformat(text)


def _float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    return float(value)


# ------------------------------
# Records
# ------------------------------

@dataclass
class Farmer:
    id: str
    name: str
    phone: str = ""
    location_name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Farmer":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            phone=row.get("phone") or "",
            location_name=row.get("location_name") or "",
            latitude=_float(row.get("latitude")),
            longitude=_float(row.get("longitude")),
            created_at=parse_datetime(row.get("created_at")),
        )


@dataclass
class Crop:
    id: str
    name: str
    planting_season: str = ""
    growth_days: int = 0
    water_requirements: str = ""

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Crop":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            planting_season=row.get("planting_season") or "",
            growth_days=int(row.get("growth_days") or 0),
            water_requirements=row.get("water_requirements") or "",
        )


@dataclass
class FarmerCrop:
    id: str
    farmer_id: str
    crop_id: str
    planting_date: Optional[date] = None
    area_hectares: float = 0.0
    status: str = ""
    crop: Optional[Crop] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "FarmerCrop":
        # PostgREST embeds the joined species under the table name
        embedded = row.get("crops")
        return cls(
            id=str(row["id"]),
            farmer_id=str(row.get("farmer_id") or ""),
            crop_id=str(row.get("crop_id") or ""),
            planting_date=parse_date(row.get("planting_date")),
            area_hectares=_float(row.get("area_hectares")),
            status=row.get("status") or "",
            crop=Crop.from_row(embedded) if embedded else None,
        )

    @property
    def crop_name(self) -> str:
        return self.crop.name if self.crop else ""


@dataclass
class Alert:
    id: str
    farmer_id: str
    alert_type: str
    message: str
    sent_at: Optional[datetime] = None
    is_read: bool = False
    dashboard_link: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Alert":
        kind = (row.get("alert_type") or OTHER).strip().lower()
        return cls(
            id=str(row["id"]),
            farmer_id=str(row.get("farmer_id") or ""),
            alert_type=kind if kind in ALERT_TYPES else OTHER,
            message=row.get("message") or "",
            sent_at=parse_datetime(row.get("sent_at")),
            is_read=bool(row.get("is_read")),
            dashboard_link=row.get("dashboard_link"),
        )


@dataclass
class WeatherData:
    id: str
    location_name: str
    latitude: float = 0.0
    longitude: float = 0.0
    temperature: float = 0.0
    humidity: float = 0.0
    rainfall: float = 0.0
    forecast: str = ""
    recorded_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "WeatherData":
        return cls(
            id=str(row["id"]),
            location_name=row.get("location_name") or "",
            latitude=_float(row.get("latitude")),
            longitude=_float(row.get("longitude")),
            temperature=_float(row.get("temperature")),
            humidity=_float(row.get("humidity")),
            rainfall=_float(row.get("rainfall")),
            forecast=row.get("forecast") or "",
            recorded_at=parse_datetime(row.get("recorded_at")),
        )


@dataclass
class ExtensionOfficer:
    id: str
    name: str
    email: str
    region: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ExtensionOfficer":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            email=row.get("email") or "",
            region=row.get("region") or "",
            created_at=parse_datetime(row.get("created_at")),
        )
