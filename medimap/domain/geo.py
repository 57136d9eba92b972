# medimap/domain/geo.py
from __future__ import annotations

import math
from numbers import Real
from typing import Any, Dict, Optional

from medimap.domain.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in km between two WGS84 points."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # float noise can push h a hair past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _is_number(x: Any) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool) and math.isfinite(x)


def parse_geojson_point(raw: Any) -> Optional[GeoPoint]:
    """
    GeoJSON `{type: "Point", coordinates: [lon, lat]}` -> GeoPoint.

    Anything else (missing, empty coordinates, wrong length, non-numeric,
    out of range, another geometry type) is treated as "no point".
    """
    if not isinstance(raw, dict):
        return None
    if raw.get("type", "Point") != "Point":
        return None
    coords = raw.get("coordinates")
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        return None
    lon, lat = coords
    if not (_is_number(lon) and _is_number(lat)):
        return None
    if not (-180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0):
        return None
    return GeoPoint(longitude=float(lon), latitude=float(lat))


def to_geojson(point: GeoPoint) -> Dict[str, Any]:
    return {"type": "Point", "coordinates": [point.longitude, point.latitude]}
