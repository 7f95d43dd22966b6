from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from .models import (Alert, Farmer, FarmerCrop, HARVEST_READY, OTHER, PLANTING_READY,
                     PROGRESS_UPDATE, WEATHER_WARNING)

# alert_type -> (icon, color name understood by the card CSS)
ALERT_STYLES: Dict[str, tuple] = {
    PLANTING_READY: ("🌱", "green"),
    WEATHER_WARNING: ("🌧️", "amber"),
    HARVEST_READY: ("📈", "blue"),
    PROGRESS_UPDATE: ("🔔", "teal"),
    OTHER: ("⚠️", "gray"),
}


def alert_style(alert_type: str) -> tuple:
    return ALERT_STYLES.get(alert_type, ALERT_STYLES[OTHER])


def alert_title(alert_type: str) -> str:
    return alert_type.replace("_", " ").title()


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def relative_time(sent_at: Optional[datetime], now: datetime) -> str:
    if sent_at is None:
        return ""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    diff_hours = int((now - sent_at).total_seconds() // 3600)
    diff_days = diff_hours // 24
    if diff_hours < 1:
        return "Just now"
    if diff_hours < 24:
        return _plural(diff_hours, "hour")
    if diff_days < 7:
        return _plural(diff_days, "day")
    return sent_at.strftime("%b %d, %Y")


def total_area(crops: Iterable[FarmerCrop]) -> float:
    return sum(c.area_hectares for c in crops)


def unread_count(alerts: Iterable[Alert]) -> int:
    return sum(1 for a in alerts if not a.is_read)


def unique_locations(farmers: Iterable[Farmer]) -> int:
    return len({f.location_name for f in farmers})


def filter_farmers(farmers: List[Farmer], term: str) -> List[Farmer]:
    """Case-insensitive substring match on name or location."""
    term = (term or "").strip().lower()
    if not term:
        return list(farmers)
    return [f for f in farmers if term in f.name.lower() or term in f.location_name.lower()]


def format_coordinates(farmer: Farmer) -> str:
    return f"{farmer.latitude:.4f}, {farmer.longitude:.4f}"


def format_date(value) -> str:
    return value.strftime("%b %d, %Y") if value else "-"
