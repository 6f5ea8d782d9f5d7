# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects; only depends on models for the Coord type.

import math
from typing import Sequence

import numpy as np

from .models import Coord


EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coord_distance(a: Coord, b: Coord) -> float:
    """haversine_distance() for two Coord values."""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def min_distance_to_polyline(point: Coord, coords: Sequence[Coord]) -> float:
    """
    Smallest great-circle distance from point to any vertex of a polyline.

    Only vertices are considered, segments are not projected onto, so long
    segments with sparse vertices read farther than they really are.

    Args:
        point:  Position to measure from.
        coords: Polyline vertices.

    Returns:
        Distance in metres.

    Raises:
        ValueError: if coords is empty.
    """
    if not coords:
        raise ValueError("Polyline has no vertices.")

    lats = np.radians(np.fromiter((c.lat for c in coords), dtype=float, count=len(coords)))
    lons = np.radians(np.fromiter((c.lon for c in coords), dtype=float, count=len(coords)))
    p_lat = math.radians(point.lat)
    p_lon = math.radians(point.lon)

    a = (
        np.sin((lats - p_lat) / 2) ** 2
        + math.cos(p_lat) * np.cos(lats) * np.sin((lons - p_lon) / 2) ** 2
    )
    dists = EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(dists.min())
