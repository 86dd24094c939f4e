"""
Great-circle geometry for route matching.

Positions are WGS84 degrees on a spherical earth. Distances are computed
in meters and converted to nautical miles at the statistics boundary.

Closest-point projection works on unit vectors: the query point is
projected onto the plane of the segment's great circle, renormalized, and
accepted if it lies on the minor arc between the endpoints; otherwise the
nearer endpoint is the closest point.

Loop detection treats the recent track as a planar lon/lat polyline and
tests segment pairs with Shapely, which is adequate at the scale of a
two-hour track window.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import LineString

from routewatch.models.route import Waypoint

EARTH_RADIUS_M = 6371008.8  # Mean earth radius
METERS_PER_NM = 1852.0

# Below this vector norm a great circle is undefined (coincident/antipodal ends)
_EPSILON = 1e-12


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def m_to_nm(meters: float) -> float:
    return meters / METERS_PER_NM


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial true course from point 1 to point 2, degrees in [0, 360)."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)

    x = math.sin(delta_lon) * math.cos(lat2_rad)
    y = (
        math.cos(lat1_rad) * math.sin(lat2_rad) -
        math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(delta_lon)
    )
    return (math.degrees(math.atan2(x, y)) + 360.0) % 360.0


def _to_vector(lat: float, lon: float) -> np.ndarray:
    lat_rad = math.radians(lat)
    lon_rad = math.radians(lon)
    return np.array([
        math.cos(lat_rad) * math.cos(lon_rad),
        math.cos(lat_rad) * math.sin(lon_rad),
        math.sin(lat_rad),
    ])


def _to_latlon(vector: np.ndarray) -> Tuple[float, float]:
    x, y, z = vector
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    lon = math.degrees(math.atan2(y, x))
    return lat, lon


def midpoint(a: Waypoint, b: Waypoint) -> Tuple[float, float]:
    """Great-circle midpoint of two waypoints."""
    total = _to_vector(a.lat, a.lon) + _to_vector(b.lat, b.lon)
    norm = np.linalg.norm(total)
    if norm < _EPSILON:
        return a.lat, a.lon
    return _to_latlon(total / norm)


def closest_point_on_segment(lat: float, lon: float, a: Waypoint, b: Waypoint) -> Tuple[float, float]:
    """Closest point to (lat, lon) on the minor great-circle arc a-b."""
    p = _to_vector(lat, lon)
    va = _to_vector(a.lat, a.lon)
    vb = _to_vector(b.lat, b.lon)

    normal = np.cross(va, vb)
    norm = np.linalg.norm(normal)
    if norm < _EPSILON:
        return a.lat, a.lon
    normal /= norm

    projected = p - np.dot(p, normal) * normal
    projected_norm = np.linalg.norm(projected)
    if projected_norm >= _EPSILON:
        projected /= projected_norm
        on_arc = (
            np.dot(np.cross(va, projected), normal) >= 0 and
            np.dot(np.cross(projected, vb), normal) >= 0
        )
        if on_arc:
            return _to_latlon(projected)

    if haversine_m(lat, lon, a.lat, a.lon) <= haversine_m(lat, lon, b.lat, b.lon):
        return a.lat, a.lon
    return b.lat, b.lon


@dataclass
class SegmentMatch:
    """
    The route leg nearest to a position.

    deviation_m is the distance from the position to its projection on the
    leg (cross-track distance when the projection falls inside the leg).
    """
    start_index: int
    end_index: int
    start: Waypoint
    end: Waypoint
    deviation_m: float
    closest: Tuple[float, float]


def find_closest_segment(waypoints: Sequence[Waypoint], lat: float, lon: float) -> Optional[SegmentMatch]:
    """Scan consecutive waypoint pairs for the minimum deviation; None if fewer than 2."""
    best: Optional[SegmentMatch] = None
    for i in range(len(waypoints) - 1):
        a = waypoints[i]
        b = waypoints[i + 1]
        closest = closest_point_on_segment(lat, lon, a, b)
        deviation = haversine_m(lat, lon, closest[0], closest[1])
        if best is None or deviation < best.deviation_m:
            best = SegmentMatch(i, i + 1, a, b, deviation, closest)
    return best


def route_length_m(waypoints: Sequence[Waypoint]) -> float:
    return sum(
        haversine_m(a.lat, a.lon, b.lat, b.lon)
        for a, b in zip(waypoints, waypoints[1:])
    )


def route_length_nm(waypoints: Sequence[Waypoint]) -> float:
    return m_to_nm(route_length_m(waypoints))


def has_loop(track: Sequence[Waypoint]) -> bool:
    """
    True if any two non-adjacent segments of the track intersect.

    Adjacent segments share an endpoint and are skipped. O(n^2) over the
    track, which is bounded in length.
    """
    segments: List[LineString] = [
        LineString([(a.lon, a.lat), (b.lon, b.lat)])
        for a, b in zip(track, track[1:])
    ]
    for i in range(len(segments)):
        for j in range(i + 2, len(segments)):
            if segments[i].intersects(segments[j]):
                return True
    return False
