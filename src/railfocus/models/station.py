"""Train station data models and the fixed high-speed rail catalog."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from railfocus.exceptions import StationNotFoundError

EARTH_RADIUS_MILES = 3958.8


class Station(BaseModel):
    """A station on a high-speed rail line."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Three-letter station code")
    name: str
    city: str
    country: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timezone: str = "UTC"
    rail_line: str = ""


def haversine_miles(origin: Station, destination: Station) -> float:
    """Great-circle distance between two stations in miles."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(destination.longitude - origin.longitude)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(min(1.0, math.sqrt(a)))


STATIONS: tuple[Station, ...] = (
    # Japan - Shinkansen (Tokaido Line)
    Station(code="TYO", name="Tokyo Station", city="Tokyo", country="Japan",
            latitude=35.6812, longitude=139.7671, timezone="Asia/Tokyo", rail_line="Shinkansen"),
    Station(code="OSA", name="Shin-Osaka Station", city="Osaka", country="Japan",
            latitude=34.7334, longitude=135.5001, timezone="Asia/Tokyo", rail_line="Shinkansen"),
    Station(code="KYO", name="Kyoto Station", city="Kyoto", country="Japan",
            latitude=34.9856, longitude=135.7585, timezone="Asia/Tokyo", rail_line="Shinkansen"),
    Station(code="NGY", name="Nagoya Station", city="Nagoya", country="Japan",
            latitude=35.1709, longitude=136.8815, timezone="Asia/Tokyo", rail_line="Shinkansen"),
    # France - TGV
    Station(code="PLY", name="Paris Gare de Lyon", city="Paris", country="France",
            latitude=48.8443, longitude=2.3743, timezone="Europe/Paris", rail_line="TGV"),
    Station(code="LPD", name="Lyon Part-Dieu", city="Lyon", country="France",
            latitude=45.7606, longitude=4.8594, timezone="Europe/Paris", rail_line="TGV"),
    Station(code="MSC", name="Marseille Saint-Charles", city="Marseille", country="France",
            latitude=43.3028, longitude=5.3803, timezone="Europe/Paris", rail_line="TGV"),
    # UK - Eurostar / HS1
    Station(code="STP", name="London St Pancras", city="London", country="United Kingdom",
            latitude=51.5322, longitude=-0.1260, timezone="Europe/London", rail_line="Eurostar"),
    # Germany - ICE
    Station(code="BHB", name="Berlin Hauptbahnhof", city="Berlin", country="Germany",
            latitude=52.5250, longitude=13.3694, timezone="Europe/Berlin", rail_line="ICE"),
    Station(code="FHB", name="Frankfurt Hauptbahnhof", city="Frankfurt", country="Germany",
            latitude=50.1072, longitude=8.6638, timezone="Europe/Berlin", rail_line="ICE"),
    Station(code="MHB", name="Munich Hauptbahnhof", city="Munich", country="Germany",
            latitude=48.1403, longitude=11.5600, timezone="Europe/Berlin", rail_line="ICE"),
    # Spain - AVE
    Station(code="MAT", name="Madrid Atocha", city="Madrid", country="Spain",
            latitude=40.4065, longitude=-3.6892, timezone="Europe/Madrid", rail_line="AVE"),
    Station(code="BSA", name="Barcelona Sants", city="Barcelona", country="Spain",
            latitude=41.3793, longitude=2.1404, timezone="Europe/Madrid", rail_line="AVE"),
    # China - CRH
    Station(code="BJS", name="Beijing South", city="Beijing", country="China",
            latitude=39.8652, longitude=116.3785, timezone="Asia/Shanghai", rail_line="CRH"),
    Station(code="SHH", name="Shanghai Hongqiao", city="Shanghai", country="China",
            latitude=31.1944, longitude=121.3200, timezone="Asia/Shanghai", rail_line="CRH"),
)

_BY_CODE = {station.code: station for station in STATIONS}


def find_station(code: str) -> Station:
    """
    Get a station by its code (case-insensitive).

    Raises:
        StationNotFoundError: If no station has that code.
    """
    station = _BY_CODE.get(code.strip().upper())
    if station is None:
        raise StationNotFoundError(f"No station found with code '{code}'")
    return station


def search_stations(text: str) -> list[Station]:
    """Find stations whose code, name or city contains *text*."""
    needle = text.strip().lower()
    if not needle:
        return list(STATIONS)
    return [
        s
        for s in STATIONS
        if needle in s.code.lower() or needle in s.name.lower() or needle in s.city.lower()
    ]


def resolve_station(text: str) -> Station:
    """Resolve a code first, then fall back to the first name/city match."""
    try:
        return find_station(text)
    except StationNotFoundError:
        pass

    matches = search_stations(text)
    if not matches:
        raise StationNotFoundError(f"No station found matching '{text}'")
    return matches[0]


def stations_for_line(line: str) -> list[Station]:
    """All catalog stations served by a rail line."""
    return [s for s in STATIONS if s.rail_line == line]


def rail_lines() -> list[str]:
    """Sorted list of distinct rail lines in the catalog."""
    return sorted({s.rail_line for s in STATIONS})
