"""
In-memory weather cache for ETA computation.

Maps a rounded sample coordinate to the last upper-air observation there.
Winds aloft change slowly relative to the tracker's 15 second cadence, so
a 30 minute TTL saves one weather request per route leg on almost every
poll.

The cache is owned by the tracker's own task and never shared across
threads, so it takes no lock.
"""

import logging
import time
from typing import Callable, Dict, Optional

from routewatch.config import config
from routewatch.models.route import WeatherSample

logger = logging.getLogger(__name__)


class WeatherCache:
    """
    TTL-bounded mapping from sampled coordinate to WeatherSample.

    Entries are reused while younger than the TTL and overwritten by the
    caller after a refetch.
    """

    def __init__(
        self,
        ttl_seconds: float = None,
        max_entries: int = None,
        precision: int = 1,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.weather.ttl_minutes * 60
        self.max_entries = max_entries if max_entries is not None else config.weather.max_entries
        self.precision = precision
        self._clock = clock

        self._cache: Dict[str, WeatherSample] = {}

        # Statistics
        self._hits = 0
        self._misses = 0

    def key(self, lat: float, lon: float) -> str:
        return f'{lat:.{self.precision}f},{lon:.{self.precision}f}'

    def get(self, lat: float, lon: float) -> Optional[WeatherSample]:
        """
        Get the cached sample for (lat, lon).

        Returns None if not cached or expired.
        """
        key = self.key(lat, lon)
        entry = self._cache.get(key)
        if entry is not None:
            if not self._expired(entry):
                self._hits += 1
                logger.debug(f'Weather cache hit {key}')
                return entry
            del self._cache[key]

        self._misses += 1
        logger.debug(f'Weather cache miss {key}')
        return None

    def put(self, lat: float, lon: float, sample: WeatherSample) -> None:
        """Store a sample, dropping expired entries and the oldest beyond capacity."""
        self._cache[self.key(lat, lon)] = sample

        expired = [key for key, entry in self._cache.items() if self._expired(entry)]
        for key in expired:
            del self._cache[key]

        if len(self._cache) > self.max_entries:
            self._evict_oldest()

    def _expired(self, entry: WeatherSample) -> bool:
        return self._clock() - entry.fetched_at >= self.ttl_seconds

    def _evict_oldest(self) -> None:
        """Remove the oldest 10% of entries when over capacity."""
        entries = sorted(self._cache.items(), key=lambda item: item[1].fetched_at)
        to_remove = max(1, len(entries) // 10, len(entries) - self.max_entries)
        for key, _ in entries[:to_remove]:
            del self._cache[key]

    def clear(self) -> None:
        """Clear entire cache."""
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        lookups = self._hits + self._misses
        return {
            'entries': len(self._cache),
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': self._hits / lookups if lookups > 0 else 0,
        }
