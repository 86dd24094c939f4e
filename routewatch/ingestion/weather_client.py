"""
Upper-air weather client (Open-Meteo forecast API).

Requests hourly wind and temperature at a single pressure level for one
coordinate. The series is limited to one hour so it starts at the current
hour, and that value is returned. Wind speed is requested in knots;
temperature arrives in Celsius and is converted to Kelvin for the true
airspeed calculation.
"""

import logging
import time
from typing import Optional

import requests

from routewatch.config import config
from routewatch.errors import WeatherFetchFailure
from routewatch.models.route import WeatherSample

logger = logging.getLogger(__name__)

CELSIUS_TO_KELVIN = 273.15


class WeatherClient:
    """Client for the Open-Meteo forecast endpoint."""

    def __init__(
        self,
        base_url: str = 'https://api.open-meteo.com/v1/forecast',
        pressure_level_hpa: int = 250,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.pressure_level_hpa = pressure_level_hpa
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'WeatherClient':
        return cls(
            base_url=config.weather.base_url,
            pressure_level_hpa=config.weather.pressure_level_hpa,
            timeout=config.weather.timeout,
        )

    @property
    def _fields(self):
        level = f'{self.pressure_level_hpa}hPa'
        return f'wind_speed_{level}', f'wind_direction_{level}', f'temperature_{level}'

    def get_sample(self, lat: float, lon: float) -> WeatherSample:
        """
        Fetch the current wind/temperature at (lat, lon).

        Raises:
            WeatherFetchFailure on network/API errors or missing values
        """
        speed_key, direction_key, temperature_key = self._fields
        params = {
            'latitude': round(lat, 4),
            'longitude': round(lon, 4),
            'hourly': ','.join(self._fields),
            'wind_speed_unit': 'kn',
            'forecast_hours': 1,
        }

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            hourly = response.json()['hourly']
            speed = hourly[speed_key][0]
            direction = hourly[direction_key][0]
            temperature_c = hourly[temperature_key][0]
        except requests.exceptions.RequestException as e:
            logger.error(f'Weather request failed for ({lat:.2f}, {lon:.2f}): {e}')
            raise WeatherFetchFailure(str(e)) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f'Unexpected weather response for ({lat:.2f}, {lon:.2f}): {e}')
            raise WeatherFetchFailure(f'Unexpected weather response: {e}') from e

        if speed is None or direction is None or temperature_c is None:
            raise WeatherFetchFailure(f'No weather values for ({lat:.2f}, {lon:.2f})')

        return WeatherSample(
            wind_speed=float(speed),
            wind_direction=float(direction),
            temperature_k=float(temperature_c) + CELSIUS_TO_KELVIN,
            fetched_at=time.time(),
        )
