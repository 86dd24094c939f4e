"""
Engine error taxonomy.

Every failure is recoverable: a failed poll leaves the previously cached
statistics in place and the next scheduled poll tries again.
"""


class RouteEngineError(Exception):
    """Base class for all route tracking errors."""


class NotConnected(RouteEngineError):
    """The callsign is not present in the telemetry feed."""


class NoFlightPlan(RouteEngineError):
    """The pilot is connected but has not filed a flight plan."""


class RouteTooShort(RouteEngineError):
    """Fewer than two usable route tokens."""


class ResolutionFailure(RouteEngineError):
    """The navigation database could not resolve the route."""


class SegmentNotFound(RouteEngineError):
    """The resolved route has no segment to match against."""


class WeatherFetchFailure(RouteEngineError):
    """The weather service did not return a usable sample."""


class TelemetryFetchFailure(RouteEngineError):
    """The telemetry feed could not be fetched or parsed."""


class BridgeClosed(RouteEngineError):
    """The resolver worker is not running."""
