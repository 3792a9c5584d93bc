import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from .entities import Country

MARKER_RADIUS = 1.01
MIN_CAMERA_Z = -10.0
MAX_CAMERA_Z = -1.5


@dataclass(frozen=True)
class Marker:
    """Country marker on the unit globe. ``name`` carries the country id for hit-testing."""

    name: str
    x: float
    y: float
    z: float

    def to_json(self) -> Dict[str, float]:
        return {"name": self.name, "x": self.x, "y": self.y, "z": self.z}


def lat_lon_to_cartesian(latitude: float, longitude: float, radius: float = 1.0) -> Tuple[float, float, float]:
    """Project degrees onto a sphere whose prime meridian faces +z."""
    lat = math.radians(latitude)
    lon = math.radians(longitude)
    x = radius * math.cos(lat) * math.sin(lon)
    y = radius * math.sin(lat)
    z = radius * math.cos(lat) * math.cos(lon)
    return x, y, z


def place_markers(countries: Iterable[Country], radius: float = MARKER_RADIUS) -> Dict[str, Marker]:
    markers = {}
    for country in countries:
        x, y, z = lat_lon_to_cartesian(country.latitude, country.longitude, radius)
        markers[country.id] = Marker(name=country.id, x=x, y=y, z=z)
    return markers


def resolve_marker(marker_name: str, countries: Iterable[Country]) -> Optional[Country]:
    """Map a tapped marker back to its country, or None for anything else (globe, stars)."""
    for country in countries:
        if country.id == marker_name:
            return country
    return None


def clamp_camera_z(z: float) -> float:
    return max(MIN_CAMERA_Z, min(MAX_CAMERA_Z, z))
