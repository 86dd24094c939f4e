"""
RouteWatch Package.

Real-time route tracking for VATSIM flights, built on SQLAlchemy, NumPy
and Shapely.

Modules:
    models/      Route/telemetry dataclasses and navdata table definitions
    navdb/       Route tokenizing, schema detection and route resolution
    ingestion/   VATSIM, oceanic track and upper-air weather clients
    analytics/   Great-circle geometry, loop detection and ETA
    tracking/    Async tracker, aircraft track and resolver worker bridge
    cache.py     TTL weather cache for ETA computation
    config.py    Centralized configuration from environment variables
    errors.py    Engine error taxonomy
"""

__version__ = '1.0.0'
