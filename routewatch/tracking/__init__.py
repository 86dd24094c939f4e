"""
Route tracking for RouteWatch.

The async Tracker, its aircraft track, and the worker bridge to the
blocking route resolver.
"""

from routewatch.tracking.track import AircraftTrack
from routewatch.tracking.bridge import ResolverBridge
from routewatch.tracking.tracker import Tracker

__all__ = ['AircraftTrack', 'ResolverBridge', 'Tracker']
