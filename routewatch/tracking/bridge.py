"""
Worker bridge between the async tracker and the blocking route resolver.

The resolver's database connection lives on one dedicated thread. The
tracker talks to it through a pair of single-slot queues, so at most one
resolution is ever outstanding and requests are served strictly in order.

    tracker task --ResolveRequest--> [requests, size 1] --> worker thread
    tracker task <--waypoints/error-- [responses, size 1] <-- worker thread

Failures inside a resolution are sent back as the response; the worker
keeps serving later requests.
"""

import asyncio
import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from routewatch.errors import BridgeClosed, ResolutionFailure, RouteEngineError
from routewatch.ingestion.nattrak_client import NatTrakClient
from routewatch.models.route import FlightPlan, Waypoint
from routewatch.navdb.resolver import RouteResolver

logger = logging.getLogger(__name__)

_STOP = object()

# How often a blocked receive checks that the worker is still alive
_LIVENESS_INTERVAL = 0.5


@dataclass
class ResolveRequest:
    tokens: List[str]
    flight_plan: FlightPlan


class ResolverBridge:
    """
    Owns the resolver worker thread and its request/response channels.

    Args:
        resolver_factory: Builds the RouteResolver; called on the worker
            thread so the connection is created where it is used.
    """

    def __init__(self, resolver_factory: Callable[[], RouteResolver]):
        self._resolver_factory = resolver_factory
        self._requests: 'queue.Queue' = queue.Queue(maxsize=1)
        self._responses: 'queue.Queue' = queue.Queue(maxsize=1)
        self._thread: Optional[threading.Thread] = None
        self._in_flight = False

        self._served = 0
        self._failed = 0

    @classmethod
    def from_url(cls, url: str = None, nattrak: Optional[NatTrakClient] = None) -> 'ResolverBridge':
        return cls(lambda: RouteResolver.from_url(url, nattrak=nattrak))

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the resolver worker thread."""
        if self.is_alive:
            logger.warning('Resolver worker already running')
            return

        self._thread = threading.Thread(
            target=self._serve,
            name='route-resolver',
            daemon=True,
        )
        self._thread.start()
        logger.info('Resolver worker started')

    def close(self, timeout: float = 5) -> None:
        """Stop the worker after any in-flight request."""
        if self.is_alive:
            self._requests.put(_STOP)
            self._thread.join(timeout=timeout)
        logger.info('Resolver worker stopped')

    def _serve(self) -> None:
        try:
            resolver = self._resolver_factory()
        except Exception as e:
            logger.error(f'Route resolver failed to start: {e}')
            return

        try:
            while True:
                request = self._requests.get()
                if request is _STOP:
                    break
                self._responses.put(self._handle(resolver, request))
        finally:
            resolver.close()

    def _handle(self, resolver: RouteResolver, request: ResolveRequest) -> Union[List[Waypoint], RouteEngineError]:
        try:
            result = resolver.resolve(request.tokens, request.flight_plan)
            self._served += 1
            return result
        except RouteEngineError as e:
            self._failed += 1
            return e
        except Exception as e:
            self._failed += 1
            logger.exception('Unexpected error while resolving route')
            return ResolutionFailure(f'Unexpected resolver error: {e}')

    def _receive(self):
        while True:
            try:
                return self._responses.get(timeout=_LIVENESS_INTERVAL)
            except queue.Empty:
                if not self.is_alive:
                    raise BridgeClosed('Resolver worker exited before responding')

    async def resolve(self, tokens: List[str], flight_plan: FlightPlan) -> List[Waypoint]:
        """
        Resolve a route on the worker and wait for the answer.

        Raises:
            BridgeClosed if the worker is not running
            ResolutionFailure (or other engine errors) from the resolver
        """
        if not self.is_alive:
            raise BridgeClosed('Resolver worker is not running')
        if self._in_flight:
            raise RuntimeError('A route resolution is already in flight')

        self._in_flight = True
        try:
            self._requests.put_nowait(ResolveRequest(list(tokens), flight_plan))
            response = await asyncio.to_thread(self._receive)
        finally:
            self._in_flight = False

        if isinstance(response, RouteEngineError):
            raise response
        return response

    @property
    def stats(self) -> dict:
        return {
            'running': self.is_alive,
            'served': self._served,
            'failed': self._failed,
        }
