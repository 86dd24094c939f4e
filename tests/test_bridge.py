import asyncio

import pytest

from routewatch.errors import BridgeClosed, ResolutionFailure
from routewatch.models import FlightPlan, Waypoint
from routewatch.tracking import ResolverBridge

PLAN = FlightPlan('EGLL', 'EHAM', 'W1 W2')


class StubResolver:
    def __init__(self):
        self.calls = []
        self.closed = False

    def resolve(self, tokens, flight_plan):
        self.calls.append(list(tokens))
        if 'BAD' in tokens:
            raise ResolutionFailure('unknown fix BAD')
        if 'BOOM' in tokens:
            raise ValueError('corrupt row')
        return [Waypoint(tok, 0.0, float(i)) for i, tok in enumerate(tokens)]

    def close(self):
        self.closed = True


@pytest.fixture
def resolver():
    return StubResolver()


@pytest.fixture
def bridge(resolver):
    bridge = ResolverBridge(lambda: resolver)
    bridge.start()
    yield bridge
    bridge.close()


def test_resolves_on_worker(bridge, resolver):
    waypoints = asyncio.run(bridge.resolve(['W1', 'W2'], PLAN))
    assert [wp.id for wp in waypoints] == ['W1', 'W2']
    assert resolver.calls == [['W1', 'W2']]
    assert bridge.stats['served'] == 1


def test_failure_is_returned_and_worker_survives(bridge, resolver):
    async def scenario():
        with pytest.raises(ResolutionFailure):
            await bridge.resolve(['W1', 'BAD'], PLAN)
        return await bridge.resolve(['W1', 'W3'], PLAN)

    waypoints = asyncio.run(scenario())
    assert [wp.id for wp in waypoints] == ['W1', 'W3']
    assert bridge.is_alive
    assert bridge.stats == {'running': True, 'served': 1, 'failed': 1}


def test_unexpected_error_becomes_resolution_failure(bridge):
    with pytest.raises(ResolutionFailure, match='corrupt row'):
        asyncio.run(bridge.resolve(['BOOM', 'W2'], PLAN))
    assert bridge.is_alive


def test_requests_served_in_order(bridge, resolver):
    async def scenario():
        for route in (['A', 'B'], ['C', 'D'], ['E', 'F']):
            await bridge.resolve(route, PLAN)

    asyncio.run(scenario())
    assert resolver.calls == [['A', 'B'], ['C', 'D'], ['E', 'F']]


def test_close_releases_resolver(resolver):
    bridge = ResolverBridge(lambda: resolver)
    bridge.start()
    bridge.close()
    assert not bridge.is_alive
    assert resolver.closed


def test_not_started():
    bridge = ResolverBridge(StubResolver)
    with pytest.raises(BridgeClosed):
        asyncio.run(bridge.resolve(['W1', 'W2'], PLAN))


def test_factory_failure_closes_bridge():
    def factory():
        raise RuntimeError('navdb missing')

    bridge = ResolverBridge(factory)
    bridge.start()
    bridge._thread.join(timeout=5)

    assert not bridge.is_alive
    with pytest.raises(BridgeClosed):
        asyncio.run(bridge.resolve(['W1', 'W2'], PLAN))
