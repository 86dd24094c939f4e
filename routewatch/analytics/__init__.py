"""
Analytics module for RouteWatch.

Great-circle geometry for matching the aircraft against its route,
loop detection over the recent track, and wind-corrected ETA.
"""

from routewatch.analytics.geometry import (
    SegmentMatch,
    find_closest_segment,
    route_length_nm,
    has_loop,
)
from routewatch.analytics.eta import EtaCalculator, EtaEstimate

__all__ = [
    'SegmentMatch',
    'find_closest_segment',
    'route_length_nm',
    'has_loop',
    'EtaCalculator',
    'EtaEstimate',
]
