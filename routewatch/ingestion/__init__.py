"""
External data clients for RouteWatch.

Handles fetching pilot telemetry, oceanic tracks and upper-air weather.
All clients are blocking and are called off the event loop.
"""

from routewatch.ingestion.vatsim_client import VatsimClient
from routewatch.ingestion.nattrak_client import NatTrakClient
from routewatch.ingestion.weather_client import WeatherClient

__all__ = ['VatsimClient', 'NatTrakClient', 'WeatherClient']
