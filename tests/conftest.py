"""
Pytest fixtures: navigation database files for both schema generations,
and stub clients standing in for the network services.
"""
import time

import pytest
from sqlalchemy import create_engine

from routewatch.errors import NotConnected, WeatherFetchFailure
from routewatch.models import FlightPlan, Pilot, V1_TABLES, V2_TABLES, WeatherSample

# Airway UL9 runs A1..A5 eastbound along 50N
AIRWAY_UL9 = [
    {'route': 'UL9', 'seqno': 10 * (i + 1), 'ident': f'A{i + 1}', 'lat': 50.0, 'lon': float(i)}
    for i in range(5)
]

NAV_FIXTURE = {
    'enroute_waypoints': [
        {'ident': 'CPT', 'lat': 51.49, 'lon': -1.22},
        {'ident': 'DUP', 'lat': 10.0, 'lon': 10.0},
    ] + [{'ident': row['ident'], 'lat': row['lat'], 'lon': row['lon']} for row in AIRWAY_UL9],
    'terminal_waypoints': [
        {'ident': 'WOD', 'lat': 51.45, 'lon': -0.88},
    ],
    'vhf_navaids': [
        {'ident': 'DUP', 'lat': 50.5, 'lon': 1.5},
        {'ident': 'LAM', 'lat': 51.646, 'lon': 0.151},
    ],
    'enroute_ndbs': [
        {'ident': 'DET', 'lat': 51.304, 'lon': 0.597},
    ],
    'terminal_ndbs': [
        {'ident': 'SPL', 'lat': 52.33, 'lon': 4.75},
    ],
    'airports': [
        {'ident': 'EGLL', 'lat': 51.4775, 'lon': -0.4614},
        {'ident': 'EHAM', 'lat': 52.3086, 'lon': 4.7639},
    ],
    'sids': [
        {'airport': 'EGLL', 'procedure': 'DET2J', 'transition': None, 'seqno': 1, 'ident': 'DET', 'lat': 51.304, 'lon': 0.597},
        {'airport': 'EGLL', 'procedure': 'DET2J', 'transition': None, 'seqno': 2, 'ident': 'LAM', 'lat': 51.646, 'lon': 0.151},
        {'airport': 'EGLL', 'procedure': 'DET2J', 'transition': None, 'seqno': 3, 'ident': 'D254', 'lat': None, 'lon': None},
        {'airport': 'EGLL', 'procedure': 'CPT3F', 'transition': None, 'seqno': 1, 'ident': 'CPT', 'lat': 51.49, 'lon': -1.22},
        {'airport': 'EGLL', 'procedure': 'CPT3F', 'transition': None, 'seqno': 2, 'ident': 'WOD', 'lat': 51.45, 'lon': -0.88},
    ],
    'stars': [
        {'airport': 'EHAM', 'procedure': 'ARTIP1B', 'transition': None, 'seqno': 1, 'ident': 'ARTIP', 'lat': 52.51, 'lon': 5.57},
        {'airport': 'EHAM', 'procedure': 'ARTIP1B', 'transition': None, 'seqno': 2, 'ident': 'SPL', 'lat': 52.33, 'lon': 4.75},
        {'airport': 'EHAM', 'procedure': 'REDF1A', 'transition': None, 'seqno': 1, 'ident': 'REDFA', 'lat': 51.94, 'lon': 4.1},
    ],
    'airways': AIRWAY_UL9,
}


def build_navdb(path, tables, fixture=None) -> str:
    """Create a SQLite navigation database file and return its URL."""
    url = f'sqlite:///{path}'
    engine = create_engine(url)
    tables.metadata.create_all(engine)
    with engine.begin() as conn:
        for role, rows in (fixture or NAV_FIXTURE).items():
            if rows:
                conn.execute(getattr(tables, role).insert(), rows)
        if tables.marker is not None:
            conn.execute(tables.marker.insert(), [{'version': '2401', 'arincversion': '20'}])
    engine.dispose()
    return url


@pytest.fixture
def v1_navdb_url(tmp_path):
    return build_navdb(tmp_path / 'navdb_v1.s3db', V1_TABLES)


@pytest.fixture
def v2_navdb_url(tmp_path):
    return build_navdb(tmp_path / 'navdb_v2.s3db', V2_TABLES)


@pytest.fixture(params=['v1', 'v2'])
def navdb_url(request, tmp_path):
    tables = V1_TABLES if request.param == 'v1' else V2_TABLES
    return build_navdb(tmp_path / f'navdb_{request.param}.s3db', tables)


class StubNatTrak:
    """Oceanic track service returning fixed routings per letter."""

    def __init__(self, routings=None):
        self.routings = routings or {}
        self.calls = []

    def get_active_routing(self, letter):
        self.calls.append(letter)
        return self.routings.get(letter)


class StubTelemetry:
    """Telemetry source replaying a list of pilots; the last one repeats."""

    def __init__(self, pilots=None):
        self.pilots = list(pilots or [])
        self.calls = 0

    def get_pilot(self, callsign):
        self.calls += 1
        if not self.pilots:
            raise NotConnected(f'Pilot {callsign} not yet connected to VATSIM')
        if len(self.pilots) > 1:
            return self.pilots.pop(0)
        return self.pilots[0]


class StubWeather:
    """Calm ISA-ish upper air; optionally failing."""

    def __init__(self, wind_speed=0.0, wind_direction=0.0, temperature_k=216.65, fail=False):
        self.wind_speed = wind_speed
        self.wind_direction = wind_direction
        self.temperature_k = temperature_k
        self.fail = fail
        self.calls = 0

    def get_sample(self, lat, lon):
        self.calls += 1
        if self.fail:
            raise WeatherFetchFailure('weather service unavailable')
        return WeatherSample(self.wind_speed, self.wind_direction, self.temperature_k, time.time())


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_pilot(lat, lon, route='W1 W2 W3', departure='EGLL', arrival='EHAM', callsign='TEST123'):
    plan = FlightPlan(departure, arrival, route) if route is not None else None
    return Pilot(callsign=callsign, latitude=lat, longitude=lon, altitude=35000, groundspeed=450, flight_plan=plan)


@pytest.fixture
def stub_nattrak():
    return StubNatTrak()


@pytest.fixture
def clock():
    return FakeClock()
