"""
Configuration management for RouteWatch.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class VatsimConfig:
    """VATSIM data feed configuration."""
    data_url: str = os.getenv('VATSIM_DATA_URL', 'https://data.vatsim.net/v3/vatsim-data.json')
    callsign: Optional[str] = os.getenv('CALLSIGN') or None
    timeout: int = 30


@dataclass(frozen=True)
class NavDbConfig:
    """Navigation database configuration."""
    url: str = os.getenv('NAVDB_URL', 'sqlite:///navdb.s3db')


@dataclass(frozen=True)
class NatTrakConfig:
    """Oceanic track service configuration."""
    url: str = os.getenv('NATTRAK_URL', 'https://nattrak.vatsim.net/api/tracks')
    timeout: int = 30


@dataclass(frozen=True)
class WeatherConfig:
    """Upper-air weather service configuration."""
    base_url: str = os.getenv('WEATHER_URL', 'https://api.open-meteo.com/v1/forecast')
    pressure_level_hpa: int = 250  # ~FL340, typical jet cruise
    ttl_minutes: int = 30
    max_entries: int = 500
    timeout: int = 30


@dataclass(frozen=True)
class TrackerConfig:
    """Route tracking settings."""
    min_poll_interval: float = 15.0  # Seconds between true recomputations
    track_capacity: int = 120
    stuck_threshold: int = 10  # Repeats tolerated before flagging stuck
    cruise_mach: float = 0.86
    loop_snapshot_path: str = os.getenv('LOOP_SNAPSHOT_PATH', 'loops.json')
    runner_interval: float = 1.0


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    vatsim: VatsimConfig
    navdb: NavDbConfig
    nattrak: NatTrakConfig
    weather: WeatherConfig
    tracker: TrackerConfig

    log_level: str


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        vatsim=VatsimConfig(),
        navdb=NavDbConfig(),
        nattrak=NatTrakConfig(),
        weather=WeatherConfig(),
        tracker=TrackerConfig(),
        log_level=os.getenv('LOG', 'WARNING').upper(),
    )


# Singleton instance
config = load_config()
