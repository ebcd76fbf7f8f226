"""Great-circle distance and location normalization.

Callers hand us locations in two shapes -- ``{"lat": .., "lng": ..}`` from
browsers and ``{"latitude": .., "longitude": ..}`` from directory rows --
either as mappings or as attribute objects.  Everything is normalised to a
:class:`LatLng` before any math runs.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, NamedTuple

_EARTH_RADIUS_METERS = 6_371_000.0


class LatLng(NamedTuple):
    latitude: float
    longitude: float


def _read(source: Any, *keys: str) -> Any:
    for key in keys:
        if isinstance(source, Mapping):
            if key in source and source[key] is not None:
                return source[key]
        elif getattr(source, key, None) is not None:
            return getattr(source, key)
    return None


def normalize_location(location: Any) -> LatLng | None:
    """Return a :class:`LatLng` for *location*, or ``None`` if unusable.

    Accepts ``LatLng``, mappings or objects exposing ``lat``/``lng`` or
    ``latitude``/``longitude``.  Non-numeric values, NaN and out-of-range
    coordinates yield ``None``.
    """
    if location is None:
        return None
    if isinstance(location, LatLng):
        return location

    lat = _read(location, "latitude", "lat")
    lng = _read(location, "longitude", "lng", "lon")
    if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
        return None
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return None

    if math.isnan(lat_f) or math.isnan(lng_f):
        return None
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
        return None
    return LatLng(lat_f, lng_f)


def haversine_meters(origin: LatLng, destination: LatLng) -> float:
    """Great-circle distance between two points in metres."""
    lat1, lng1 = math.radians(origin.latitude), math.radians(origin.longitude)
    lat2, lng2 = math.radians(destination.latitude), math.radians(destination.longitude)
    d_lat = lat2 - lat1
    d_lng = lng2 - lng1

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    return 2 * _EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def distance_between(origin: Any, destination: Any) -> float | None:
    """Normalise both ends and return the distance in metres, or ``None``."""
    a = normalize_location(origin)
    b = normalize_location(destination)
    if a is None or b is None:
        return None
    return haversine_meters(a, b)
