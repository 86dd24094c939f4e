"""
Bounded history of observed aircraft positions.

Only position changes are recorded; a repeated position bumps a counter
instead, and a long enough run of repeats marks the aircraft as stuck
(frozen simulator, paused sim, crashed client).
"""

import json
from collections import deque
from typing import Deque, List

from routewatch.analytics.geometry import has_loop
from routewatch.config import config
from routewatch.models.route import Waypoint, waypoints_to_json


class AircraftTrack:
    """
    FIFO of the most recent distinct positions.

    At the default 15 second cadence 120 samples cover about half an hour
    of distinct movement.
    """

    def __init__(self, capacity: int = None, stuck_threshold: int = None):
        self.capacity = capacity if capacity is not None else config.tracker.track_capacity
        self.stuck_threshold = stuck_threshold if stuck_threshold is not None else config.tracker.stuck_threshold
        self._positions: Deque[Waypoint] = deque(maxlen=self.capacity)
        self.repeat_count = 0

    def push(self, lat: float, lon: float) -> bool:
        """Record a sample; returns the updated stuck flag."""
        if self._positions and self._positions[-1].same_position(lat, lon):
            self.repeat_count += 1
        else:
            self.repeat_count = 0
            self._positions.append(Waypoint.unknown(lat, lon))
        return self.stuck

    @property
    def stuck(self) -> bool:
        return self.repeat_count > self.stuck_threshold

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._positions)

    def has_loop(self) -> bool:
        return has_loop(self.waypoints)

    def to_json(self) -> str:
        return json.dumps(waypoints_to_json(self.waypoints), indent=2)

    def __len__(self) -> int:
        return len(self._positions)
