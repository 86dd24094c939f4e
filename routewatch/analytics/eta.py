"""
Wind-corrected arrival time estimation.

For each leg of the remaining route:

1. Great-circle distance and initial bearing
2. Wind/temperature sampled at the leg midpoint (via WeatherCache)
3. True airspeed from cruise Mach and temperature:
       TAS = mach * 39 * sqrt(T_kelvin)
4. Groundspeed = TAS + wind_speed * cos(wind_direction - bearing)
5. Leg time = distance_nm / groundspeed_kt

A failed weather fetch fails the whole estimate; there is no no-wind
fallback.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from routewatch.analytics.geometry import haversine_m, initial_bearing, m_to_nm, midpoint
from routewatch.cache import WeatherCache
from routewatch.config import config
from routewatch.errors import WeatherFetchFailure
from routewatch.ingestion.weather_client import WeatherClient
from routewatch.models.route import Waypoint, WeatherSample

logger = logging.getLogger(__name__)

# Speed of sound in knots is ~38.97 * sqrt(T)
SPEED_OF_SOUND_COEFFICIENT = 39.0


def true_airspeed(temperature_k: float, mach: float = 0.86) -> float:
    """True airspeed in knots at the given static air temperature."""
    return mach * SPEED_OF_SOUND_COEFFICIENT * math.sqrt(temperature_k)


def groundspeed(tas: float, wind_speed: float, wind_direction: float, bearing: float) -> float:
    """TAS plus the signed wind component along the course (angles in degrees)."""
    wind_component = wind_speed * math.cos(math.radians(wind_direction - bearing))
    return tas + wind_component


@dataclass
class EtaEstimate:
    """Total remaining flight time and the resulting local arrival time."""
    total_hours: float
    arrival: datetime
    legs: int


class EtaCalculator:
    """
    Computes ETA over a waypoint sequence using cached upper winds.

    Weather fetches run in a worker thread so the event loop never blocks.
    """

    def __init__(
        self,
        client: Optional[WeatherClient] = None,
        cache: Optional[WeatherCache] = None,
        mach: float = None,
    ):
        self.client = client or WeatherClient.from_config()
        self.cache = cache if cache is not None else WeatherCache()
        self.mach = mach if mach is not None else config.tracker.cruise_mach

    async def sample(self, lat: float, lon: float) -> WeatherSample:
        cached = self.cache.get(lat, lon)
        if cached is not None:
            return cached

        sample = await asyncio.to_thread(self.client.get_sample, lat, lon)
        self.cache.put(lat, lon, sample)
        return sample

    async def estimate(self, route: List[Waypoint]) -> EtaEstimate:
        """
        Estimate arrival over ``route`` (current position first).

        Raises:
            WeatherFetchFailure if any leg's weather cannot be fetched, or
            gives a non-positive groundspeed
        """
        total_hours = 0.0
        for a, b in zip(route, route[1:]):
            distance_nm = m_to_nm(haversine_m(a.lat, a.lon, b.lat, b.lon))
            bearing = initial_bearing(a.lat, a.lon, b.lat, b.lon)
            mid_lat, mid_lon = midpoint(a, b)

            weather = await self.sample(mid_lat, mid_lon)
            tas = true_airspeed(weather.temperature_k, self.mach)
            gs = groundspeed(tas, weather.wind_speed, weather.wind_direction, bearing)
            if gs <= 0:
                raise WeatherFetchFailure(
                    f'Wind sample at ({mid_lat:.2f}, {mid_lon:.2f}) gives groundspeed {gs:.0f}kt'
                )
            total_hours += distance_nm / gs

        arrival = (datetime.now(timezone.utc) + timedelta(hours=total_hours)).astimezone()
        logger.debug(f'ETA {arrival:%H:%M %Z} ({total_hours:.2f}h over {max(len(route) - 1, 0)} legs)')
        return EtaEstimate(total_hours=total_hours, arrival=arrival, legs=max(len(route) - 1, 0))
