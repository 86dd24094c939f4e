"""
VATSIM data feed client.

The v3 feed is a single JSON document refreshed every ~15 seconds
containing every connected pilot. Relevant pilot fields:

    callsign     - e.g. 'BAW123'
    latitude     - WGS84 latitude
    longitude    - WGS84 longitude
    altitude     - feet
    groundspeed  - knots
    flight_plan  - {departure, arrival, route, ...} or null
"""

import logging
from typing import List, Optional

import requests

from routewatch.config import config
from routewatch.errors import NotConnected, TelemetryFetchFailure
from routewatch.models.route import Pilot

logger = logging.getLogger(__name__)


class VatsimClient:
    """Client for the VATSIM network data feed."""

    def __init__(
        self,
        data_url: str = 'https://data.vatsim.net/v3/vatsim-data.json',
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.data_url = data_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'VatsimClient':
        """Create client from application configuration."""
        return cls(data_url=config.vatsim.data_url, timeout=config.vatsim.timeout)

    def fetch_pilots(self) -> List[dict]:
        """
        Fetch the raw pilot records.

        Raises:
            TelemetryFetchFailure on network/API/parse errors
        """
        logger.debug(f'Fetching telemetry: {self.data_url}')

        try:
            response = self.session.get(self.data_url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            logger.error('VATSIM data feed timeout')
            raise TelemetryFetchFailure('VATSIM data feed timeout') from e
        except requests.exceptions.HTTPError as e:
            logger.error(f'VATSIM data feed error: {e.response.status_code}')
            raise TelemetryFetchFailure(f'VATSIM data feed returned {e.response.status_code}') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'VATSIM request failed: {e}')
            raise TelemetryFetchFailure(str(e)) from e
        except ValueError as e:
            logger.error(f'VATSIM data feed returned invalid JSON: {e}')
            raise TelemetryFetchFailure('Invalid JSON from VATSIM data feed') from e

        return data.get('pilots') or []

    def get_pilot(self, callsign: str) -> Pilot:
        """
        Fetch the current record for ``callsign``.

        Raises:
            NotConnected if the callsign is not in the feed
            TelemetryFetchFailure on fetch or parse errors
        """
        wanted = callsign.upper()
        for record in self.fetch_pilots():
            if (record.get('callsign') or '').upper() != wanted:
                continue
            try:
                return Pilot.from_dict(record)
            except (KeyError, ValueError, TypeError) as e:
                raise TelemetryFetchFailure(f'Malformed pilot record for {callsign}: {e}') from e

        raise NotConnected(f'Pilot {callsign} not yet connected to VATSIM')
