"""
Data models for RouteWatch.

Route/telemetry value types plus the navigation database table
definitions for both schema generations.
"""

from routewatch.models.base import create_navdb_engine
from routewatch.models.navdb import NavTables, V1_TABLES, V2_TABLES, V2_MARKER_TABLE
from routewatch.models.route import (
    Waypoint,
    FlightPlan,
    Pilot,
    WeatherSample,
    RouteStatistics,
    waypoint_ids,
    waypoints_to_json,
)

__all__ = [
    'create_navdb_engine',
    'NavTables',
    'V1_TABLES',
    'V2_TABLES',
    'V2_MARKER_TABLE',
    'Waypoint',
    'FlightPlan',
    'Pilot',
    'WeatherSample',
    'RouteStatistics',
    'waypoint_ids',
    'waypoints_to_json',
]
