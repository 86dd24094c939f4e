"""
Route tracker - periodic route progress and anomaly statistics.

Each poll:
1. Fetch the pilot's current telemetry
2. Update the aircraft track (stuck detection)
3. Tokenize the filed route; resolve it again only if it changed
4. Detect a self-intersecting track (holding, orbiting, lost)
5. Match the position against the resolved route
6. Compute progress, deviation and distance to the next waypoint
7. Estimate a wind-corrected ETA over the remaining route

Polls are rate limited: within the poll window the last snapshot is
returned without any I/O. A failing poll raises and leaves the previous
snapshot in place, so consumers keep seeing stale-but-valid statistics
until the next successful poll.

The tracker owns its track, route and weather cache exclusively; it must
be driven from a single task.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from routewatch.analytics.eta import EtaCalculator
from routewatch.analytics.geometry import find_closest_segment, haversine_m, m_to_nm, route_length_nm
from routewatch.config import config
from routewatch.errors import NoFlightPlan, RouteTooShort, SegmentNotFound
from routewatch.ingestion.vatsim_client import VatsimClient
from routewatch.models.route import RouteStatistics, Waypoint, waypoint_ids
from routewatch.navdb.tokens import route_fingerprint, tokenize_route
from routewatch.tracking.bridge import ResolverBridge
from routewatch.tracking.track import AircraftTrack

logger = logging.getLogger(__name__)


class Tracker:
    """
    Tracks one callsign against its filed route.

    Args:
        callsign: Pilot callsign to follow
        bridge: Started ResolverBridge for route resolution
        telemetry: Telemetry client (created from config if None)
        eta: ETA calculator (created from config if None)
        track: Aircraft track (created from config if None)
        min_poll_interval: Seconds between true recomputations
        loop_snapshot_path: Where the track is written when a loop is found
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        callsign: str,
        bridge: ResolverBridge,
        telemetry: Optional[VatsimClient] = None,
        eta: Optional[EtaCalculator] = None,
        track: Optional[AircraftTrack] = None,
        min_poll_interval: float = None,
        loop_snapshot_path: str = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.callsign = callsign
        self.bridge = bridge
        self.telemetry = telemetry or VatsimClient.from_config()
        self.eta = eta or EtaCalculator()
        self.track = track or AircraftTrack()
        self.min_poll_interval = (
            min_poll_interval if min_poll_interval is not None else config.tracker.min_poll_interval
        )
        self.loop_snapshot_path = Path(loop_snapshot_path or config.tracker.loop_snapshot_path)
        self._clock = clock

        self.route: List[Waypoint] = []
        self._fingerprint: Optional[Tuple[int, str]] = None
        self._last_poll: Optional[float] = None
        self._last_stats: Optional[RouteStatistics] = None

    @property
    def last_statistics(self) -> Optional[RouteStatistics]:
        return self._last_stats

    async def statistics(self) -> Optional[RouteStatistics]:
        """
        Return current route statistics, recomputing at most once per window.

        Returns None only if no poll has succeeded yet and the window has
        not elapsed.

        Raises:
            RouteEngineError subclasses on any failed step; the cached
            snapshot is left unchanged
        """
        now = self._clock()
        if self._last_poll is not None and now - self._last_poll < self.min_poll_interval:
            logger.debug('Poll throttled, returning cached statistics')
            return self._last_stats

        pilot = await asyncio.to_thread(self.telemetry.get_pilot, self.callsign)
        self._last_poll = self._clock()

        stuck = self.track.push(pilot.latitude, pilot.longitude)

        if pilot.flight_plan is None:
            raise NoFlightPlan(f'Pilot {self.callsign} has no flight plan')

        tokens = tokenize_route(pilot.flight_plan.route)
        if len(tokens) < 2:
            raise RouteTooShort(f'Route too short: {pilot.flight_plan.route!r}')

        fingerprint = route_fingerprint(tokens)
        if fingerprint != self._fingerprint:
            logger.debug('Recomputing route waypoints')
            self.route = await self.bridge.resolve(tokens, pilot.flight_plan)
            self._fingerprint = fingerprint
            logger.debug(f'New route: {" -> ".join(waypoint_ids(self.route))}')

        in_loop = self.track.has_loop()
        if in_loop:
            logger.warning(f'{self.callsign} track intersects itself, writing {self.loop_snapshot_path}')
            await asyncio.to_thread(self._write_loop_snapshot)

        match = find_closest_segment(self.route, pilot.latitude, pilot.longitude)
        if match is None:
            raise SegmentNotFound(f'Resolved route has {len(self.route)} waypoint(s)')

        distance_to_next = haversine_m(pilot.latitude, pilot.longitude, match.end.lat, match.end.lon)
        total_nm = route_length_nm(self.route)
        done_nm = route_length_nm(self.route[:match.start_index + 1])
        done_nm += m_to_nm(haversine_m(match.start.lat, match.start.lon, pilot.latitude, pilot.longitude))
        progress = done_nm / total_nm * 100.0 if total_nm > 0 else 0.0

        leftover = self.route[match.end_index + 1:]
        position = Waypoint.unknown(pilot.latitude, pilot.longitude)
        estimate = await self.eta.estimate([position, match.end] + leftover)

        self._last_stats = RouteStatistics(
            leftover_route=waypoint_ids(leftover),
            next_waypoint=match.end.id,
            prev_waypoint=match.start.id,
            deviation_nm=m_to_nm(match.deviation_m),
            progress_pct=progress,
            dist_next_wp_nm=m_to_nm(distance_to_next),
            in_loop=in_loop,
            stuck=stuck,
            pilot=pilot,
            eta=estimate.arrival,
        )
        return self._last_stats

    def close(self) -> None:
        """Stop the resolver worker."""
        self.bridge.close()

    def _write_loop_snapshot(self) -> None:
        self.loop_snapshot_path.write_text(self.track.to_json())
