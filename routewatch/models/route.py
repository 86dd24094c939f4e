"""
Route and telemetry value types.

These are plain dataclasses passed between the tracker, the resolver worker
and the external clients. Nothing here touches the database.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Any

UNKNOWN_WAYPOINT_ID = 'unknown'


@dataclass
class Waypoint:
    """
    A named or synthetic geographic point.

    Synthetic waypoints (id 'unknown') represent raw observed aircraft
    positions rather than navigation fixes.
    """
    id: str
    lat: float
    lon: float

    @classmethod
    def unknown(cls, lat: float, lon: float) -> 'Waypoint':
        return cls(UNKNOWN_WAYPOINT_ID, lat, lon)

    def same_position(self, lat: float, lon: float) -> bool:
        return self.lat == lat and self.lon == lon

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FlightPlan:
    """Filed flight plan as published by the telemetry feed."""
    departure: str
    arrival: str
    route: str

    @classmethod
    def from_dict(cls, data: dict) -> 'FlightPlan':
        return cls(
            departure=(data.get('departure') or '').upper(),
            arrival=(data.get('arrival') or '').upper(),
            route=data.get('route') or '',
        )


@dataclass
class Pilot:
    """
    A connected pilot record from the telemetry feed.

    Altitude is in feet, groundspeed in knots.
    """
    callsign: str
    latitude: float
    longitude: float
    altitude: int = 0
    groundspeed: int = 0
    flight_plan: Optional[FlightPlan] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Pilot':
        """
        Parse a pilot entry from the VATSIM v3 data feed.

        Raises KeyError/ValueError/TypeError on malformed records; the
        client turns these into TelemetryFetchFailure.
        """
        plan = data.get('flight_plan')
        return cls(
            callsign=data['callsign'],
            latitude=float(data['latitude']),
            longitude=float(data['longitude']),
            altitude=int(data.get('altitude') or 0),
            groundspeed=int(data.get('groundspeed') or 0),
            flight_plan=FlightPlan.from_dict(plan) if plan else None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WeatherSample:
    """
    Upper-air observation at a sampled coordinate.

    Wind speed is in knots, direction in degrees (the direction the wind
    blows from), temperature in Kelvin. fetched_at is a time.time() value.
    """
    wind_speed: float
    wind_direction: float
    temperature_k: float
    fetched_at: float


@dataclass
class RouteStatistics:
    """
    Externally visible tracking snapshot.

    Replaced wholesale on each successful poll. Distances are in nautical
    miles, progress in percent.
    """
    leftover_route: List[str]
    next_waypoint: str
    prev_waypoint: str
    deviation_nm: float
    progress_pct: float
    dist_next_wp_nm: float
    in_loop: bool
    stuck: bool
    pilot: Pilot
    eta: Optional[datetime] = None
    computed_at: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            'leftover_route': list(self.leftover_route),
            'next_waypoint': self.next_waypoint,
            'prev_waypoint': self.prev_waypoint,
            'deviation_nm': round(self.deviation_nm, 2),
            'progress_pct': round(self.progress_pct, 2),
            'dist_next_wp_nm': round(self.dist_next_wp_nm, 2),
            'in_loop': self.in_loop,
            'stuck': self.stuck,
            'pilot': self.pilot.to_dict(),
            'eta': self.eta.isoformat() if self.eta else None,
            'computed_at': self.computed_at.isoformat(),
        }


def waypoint_ids(waypoints: List[Waypoint]) -> List[str]:
    return [wpt.id for wpt in waypoints]


def waypoints_to_json(waypoints: List[Waypoint]) -> List[Any]:
    return [wpt.to_dict() for wpt in waypoints]
