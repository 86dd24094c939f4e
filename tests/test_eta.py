import asyncio
import math
from datetime import datetime, timezone

import pytest

from routewatch.analytics.eta import EtaCalculator, groundspeed, true_airspeed
from routewatch.cache import WeatherCache
from routewatch.errors import WeatherFetchFailure
from routewatch.models import Waypoint
from tests.conftest import StubWeather

ROUTE = [Waypoint.unknown(0.0, 0.0), Waypoint('E1', 0.0, 1.0), Waypoint('E2', 0.0, 2.0)]


def test_true_airspeed():
    assert true_airspeed(216.65) == pytest.approx(0.86 * 39 * math.sqrt(216.65))
    assert true_airspeed(216.65, mach=0.78) < true_airspeed(216.65)


def test_groundspeed_wind_component():
    assert groundspeed(480.0, 50.0, 90.0, 90.0) == pytest.approx(530.0)
    assert groundspeed(480.0, 50.0, 270.0, 90.0) == pytest.approx(430.0)
    assert groundspeed(480.0, 50.0, 0.0, 90.0) == pytest.approx(480.0)


def test_estimate_calm_air():
    weather = StubWeather()
    calc = EtaCalculator(client=weather, cache=WeatherCache(ttl_seconds=1800), mach=0.86)

    before = datetime.now(timezone.utc)
    estimate = asyncio.run(calc.estimate(ROUTE))

    distance_nm = 2 * 111195.08 / 1852.0
    expected_hours = distance_nm / true_airspeed(216.65, 0.86)
    assert estimate.total_hours == pytest.approx(expected_hours, rel=1e-4)
    assert estimate.legs == 2
    assert estimate.arrival.tzinfo is not None
    assert (estimate.arrival - before).total_seconds() == pytest.approx(expected_hours * 3600, abs=5)


def test_estimate_reuses_cached_weather():
    weather = StubWeather()
    calc = EtaCalculator(client=weather, cache=WeatherCache(ttl_seconds=1800), mach=0.86)

    asyncio.run(calc.estimate(ROUTE))
    assert weather.calls == 2
    asyncio.run(calc.estimate(ROUTE))
    assert weather.calls == 2


def test_single_point_route_has_no_legs():
    calc = EtaCalculator(client=StubWeather(), cache=WeatherCache(ttl_seconds=1800), mach=0.86)
    estimate = asyncio.run(calc.estimate(ROUTE[:1]))
    assert estimate.total_hours == 0
    assert estimate.legs == 0


def test_weather_failure_fails_estimate():
    calc = EtaCalculator(client=StubWeather(fail=True), cache=WeatherCache(ttl_seconds=1800), mach=0.86)
    with pytest.raises(WeatherFetchFailure):
        asyncio.run(calc.estimate(ROUTE))


def test_non_positive_groundspeed_fails_estimate():
    # 600kt component against an eastbound course exceeds cruise TAS
    weather = StubWeather(wind_speed=600.0, wind_direction=270.0)
    calc = EtaCalculator(client=weather, cache=WeatherCache(ttl_seconds=1800), mach=0.86)
    with pytest.raises(WeatherFetchFailure, match='groundspeed'):
        asyncio.run(calc.estimate(ROUTE))
