"""
North Atlantic track client.

The track service publishes the current track system as a list of
records with an ``identifier`` letter, an ``active`` flag and free-text
``last_routeing`` such as ``RESNO 55/20 56/30 57/40 58/50 PRAWN``.
"""

import logging
from typing import Optional

import requests

from routewatch.config import config

logger = logging.getLogger(__name__)


class NatTrakClient:
    """
    Client for the oceanic track service.

    Lookups are best effort: a failed fetch or a missing/inactive track is
    logged and yields no routing, so the track token contributes nothing.
    """

    def __init__(
        self,
        url: str = 'https://nattrak.vatsim.net/api/tracks',
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'NatTrakClient':
        return cls(url=config.nattrak.url, timeout=config.nattrak.timeout)

    def get_active_routing(self, letter: str) -> Optional[str]:
        """Routing text of the active track ``letter``, or None."""
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            tracks = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f'Oceanic track fetch failed: {e}')
            return None

        for track in tracks or []:
            if (track.get('identifier') or '').upper() == letter.upper() and track.get('active'):
                return track.get('last_routeing') or None

        logger.warning(f'Track {letter} not found or not active')
        return None
