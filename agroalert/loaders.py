"""Per-screen data loaders.

Every loader returns ``LoadResult`` values and never raises: a failed query
is logged and becomes an error result whose collection is an empty list, so
screens can tell "nothing there" apart from "could not load".
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar

from .config import ALERT_LIMIT
from .errors import StoreError
from .models import Alert, Farmer, FarmerCrop, WeatherData
from .store import ALERTS, CROPS, FARMER_CROPS, FARMERS, WEATHER_DATA, DataStore, table

log = logging.getLogger(__name__)

T = TypeVar("T")

SUCCESS = "success"
EMPTY = "empty"
ERROR = "error"


@dataclass
class LoadResult(Generic[T]):
    status: str
    data: T
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != ERROR

    @property
    def is_empty(self) -> bool:
        return self.status == EMPTY


def _many(what: str, fetch: Callable[[], List[Any]]) -> LoadResult[List[Any]]:
    try:
        items = fetch()
    except (StoreError, KeyError, TypeError, ValueError) as e:
        log.error("Error loading %s: %s", what, e, exc_info=True)
        return LoadResult(status=ERROR, data=[], error=str(e))
    return LoadResult(status=SUCCESS if items else EMPTY, data=items)


def _one(what: str, fetch: Callable[[], Any]) -> LoadResult[Any]:
    try:
        item = fetch()
    except (StoreError, KeyError, TypeError, ValueError) as e:
        log.error("Error loading %s: %s", what, e, exc_info=True)
        return LoadResult(status=ERROR, data=None, error=str(e))
    return LoadResult(status=EMPTY if item is None else SUCCESS, data=item)


# ------------------------------
# Single collections
# ------------------------------

def load_farmers(store: DataStore) -> LoadResult[List[Farmer]]:
    return _many("farmers", lambda: [
        Farmer.from_row(r) for r in store.execute(table(FARMERS).order("name"))
    ])


def load_farmer(store: DataStore, farmer_id: str) -> LoadResult[Optional[Farmer]]:
    def fetch():
        row = store.fetch_one(table(FARMERS).eq("id", farmer_id))
        return Farmer.from_row(row) if row else None
    return _one(f"farmer {farmer_id}", fetch)


def load_weather_for(store: DataStore, location_name: str) -> LoadResult[Optional[WeatherData]]:
    """Weather is tied to a farmer by exact location name; no match means no weather."""
    def fetch():
        row = store.fetch_one(table(WEATHER_DATA).eq("location_name", location_name))
        return WeatherData.from_row(row) if row else None
    return _one(f"weather for {location_name!r}", fetch)


def load_all_weather(store: DataStore) -> LoadResult[List[WeatherData]]:
    return _many("weather", lambda: [
        WeatherData.from_row(r) for r in store.execute(table(WEATHER_DATA))
    ])


def load_farmer_crops(store: DataStore, farmer_id: str) -> LoadResult[List[FarmerCrop]]:
    return _many(f"crops for farmer {farmer_id}", lambda: [
        FarmerCrop.from_row(r)
        for r in store.execute(table(FARMER_CROPS).with_embed(CROPS).eq("farmer_id", farmer_id))
    ])


def load_alerts(store: DataStore, farmer_id: str, limit: Optional[int] = None) -> LoadResult[List[Alert]]:
    def fetch():
        q = table(ALERTS).eq("farmer_id", farmer_id).order("sent_at", descending=True)
        if limit is not None:
            q.limit(limit)
        return [Alert.from_row(r) for r in store.execute(q)]
    return _many(f"alerts for farmer {farmer_id}", fetch)


# ------------------------------
# Screens
# ------------------------------

@dataclass
class FarmerDashboardData:
    farmer: LoadResult[Optional[Farmer]]
    weather: LoadResult[Optional[WeatherData]]
    crops: LoadResult[List[FarmerCrop]]
    alerts: LoadResult[List[Alert]]

    @property
    def errors(self) -> List[str]:
        parts = [self.farmer, self.weather, self.crops, self.alerts]
        return [p.error for p in parts if p.status == ERROR and p.error]


@dataclass
class PortalData:
    farmers: LoadResult[List[Farmer]]
    weather: LoadResult[List[WeatherData]]


@dataclass
class FarmerDetails:
    crops: LoadResult[List[FarmerCrop]]
    alerts: LoadResult[List[Alert]]
    errors: List[str] = field(default_factory=list)


def load_farmer_directory(store: DataStore) -> LoadResult[List[Farmer]]:
    return load_farmers(store)


def load_farmer_dashboard(store: DataStore, farmer_id: str,
                          alert_limit: int = ALERT_LIMIT) -> FarmerDashboardData:
    farmer = load_farmer(store, farmer_id)
    if farmer.data is not None:
        weather = load_weather_for(store, farmer.data.location_name)
    else:
        weather = LoadResult(status=EMPTY, data=None)
    return FarmerDashboardData(
        farmer=farmer,
        weather=weather,
        crops=load_farmer_crops(store, farmer_id),
        alerts=load_alerts(store, farmer_id, limit=alert_limit),
    )


def load_portal_overview(store: DataStore) -> PortalData:
    return PortalData(farmers=load_farmers(store), weather=load_all_weather(store))


def load_farmer_details(store: DataStore, farmer_id: str) -> FarmerDetails:
    crops = load_farmer_crops(store, farmer_id)
    alerts = load_alerts(store, farmer_id)
    errors = [r.error for r in (crops, alerts) if r.status == ERROR and r.error]
    return FarmerDetails(crops=crops, alerts=alerts, errors=errors)
