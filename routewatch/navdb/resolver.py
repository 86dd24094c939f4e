"""
Route resolver - turns a filed route into an ordered waypoint sequence.

Resolution is best effort: the goal is a usable polyline for progress and
deviation tracking, not flight-plan validation. Per token, in order:

1. Literal coordinate (``51N030W``)
2. Oceanic track designator (``NATA``), expanded from the live track feed
3. Named fix (waypoints, VORs, NDBs); ambiguous names resolve to the
   candidate nearest the previous waypoint
4. Airway, sliced between the previous waypoint and the next token

The first and last tokens are tried as SID/STAR procedures before that,
and the destination airport is appended at the end. The result is
deduplicated by identifier, keeping the first occurrence.

The resolver owns its database connection and must only be used from the
thread that created it (see ``routewatch.tracking.bridge``).
"""

import logging
from typing import List, Optional

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from routewatch.analytics.geometry import haversine_m
from routewatch.errors import ResolutionFailure
from routewatch.ingestion.nattrak_client import NatTrakClient
from routewatch.models.base import create_navdb_engine
from routewatch.models.route import FlightPlan, Waypoint
from routewatch.navdb.procedures import ProcedureKind, select_procedure
from routewatch.navdb.schema import detect_schema
from routewatch.navdb.tokens import (
    base_identifier,
    is_oceanic_track,
    parse_coordinate_token,
    parse_track_coordinate,
)

logger = logging.getLogger(__name__)


def closest_fix(candidates: List[Waypoint], previous: Optional[Waypoint]) -> Waypoint:
    """
    Pick the candidate nearest the previous waypoint.

    Ties and the no-previous case resolve to the first candidate in query
    order.
    """
    if previous is None:
        return candidates[0]
    return min(
        candidates,
        key=lambda c: haversine_m(previous.lat, previous.lon, c.lat, c.lon),
    )


def slice_airway(airway: List[Waypoint], join_fix: str, exit_fix: str) -> List[Waypoint]:
    """
    Fixes strictly between the join and exit fixes.

    ``airway`` is in stored (descending sequence) order; when the exit fix
    comes first the airway is flown backwards and the slice is reversed.
    Missing or adjacent fixes contribute nothing.
    """
    ids = [wpt.id for wpt in airway]
    if join_fix not in ids or exit_fix not in ids:
        return []

    start = ids.index(join_fix)
    end = ids.index(exit_fix)
    if start + 1 == end:
        return []
    if start + 1 > end:
        return list(reversed(airway[end + 1:start]))
    return airway[start + 1:end]


def dedupe_waypoints(waypoints: List[Waypoint]) -> List[Waypoint]:
    seen = set()
    result = []
    for wpt in waypoints:
        if wpt.id not in seen:
            seen.add(wpt.id)
            result.append(wpt)
    return result


class RouteResolver:
    """
    Resolves route tokens against the navigation database.

    Args:
        connection: Open connection; the resolver takes ownership.
        nattrak: Oceanic track client (created from config if None).
        engine: Engine to dispose on close, when the resolver created it.
    """

    def __init__(
        self,
        connection: Connection,
        nattrak: Optional[NatTrakClient] = None,
        engine: Optional[Engine] = None,
    ):
        self.connection = connection
        self.navdb = detect_schema(connection)
        self.nattrak = nattrak or NatTrakClient.from_config()
        self._engine = engine

    @classmethod
    def from_url(cls, url: str = None, nattrak: Optional[NatTrakClient] = None) -> 'RouteResolver':
        """Open the navigation database at ``url`` (config default if None)."""
        engine = create_navdb_engine(url)
        return cls(engine.connect(), nattrak=nattrak, engine=engine)

    def close(self) -> None:
        self.connection.close()
        if self._engine is not None:
            self._engine.dispose()

    def resolve(self, tokens: List[str], flight_plan: FlightPlan) -> List[Waypoint]:
        """
        Resolve a tokenized route into unique, ordered waypoints.

        Raises:
            ResolutionFailure on any navigation database error
        """
        try:
            waypoints = self._resolve(tokens, flight_plan)
        except SQLAlchemyError as e:
            logger.error(f'Navigation database error while resolving route: {e}')
            raise ResolutionFailure(f'Navigation database error: {e}') from e
        return dedupe_waypoints(waypoints)

    def _resolve(self, tokens: List[str], flight_plan: FlightPlan) -> List[Waypoint]:
        wps: List[Waypoint] = []
        if not tokens:
            return wps

        first = tokens[0]
        sid = self._fetch_procedure(flight_plan.departure, first, ProcedureKind.SID)
        if sid:
            wps.extend(sid)
        else:
            self._expand_token(wps, first, '')

        for i in range(1, len(tokens) - 1):
            self._expand_token(wps, tokens[i], tokens[i + 1])

        if len(tokens) > 1:
            last = tokens[-1]
            star = self._fetch_procedure(flight_plan.arrival, last, ProcedureKind.STAR)
            if star:
                wps.extend(star)
            else:
                self._expand_token(wps, last, '')

        destination = self.navdb.airport(flight_plan.arrival) if flight_plan.arrival else None
        if destination:
            wps.append(destination)

        return wps

    def _expand_token(self, wps: List[Waypoint], token: str, next_token: str) -> None:
        base = base_identifier(token)

        coordinate = parse_coordinate_token(base)
        if coordinate:
            wps.append(coordinate)
            return

        if is_oceanic_track(base):
            wps.extend(self._fetch_oceanic_track(base[3], wps[-1] if wps else None))
            return

        fixes = self.navdb.fixes(base)
        if fixes:
            wps.append(closest_fix(fixes, wps[-1] if wps else None))
            return

        # Airways need a fix to join from
        if wps:
            airway = self.navdb.airway(base)
            wps.extend(slice_airway(airway, wps[-1].id, base_identifier(next_token)))

    def _fetch_procedure(self, airport: str, token: str, kind: ProcedureKind) -> List[Waypoint]:
        if not airport:
            return []
        candidates = self.navdb.procedure_candidates(kind, airport)
        chosen = select_procedure(token, candidates)
        if chosen is None:
            return []

        logger.debug(f'{kind.name} {token} at {airport} -> {chosen.procedure} {chosen.transition or ""}')
        return self.navdb.procedure_waypoints(kind, airport, chosen.procedure, chosen.transition)

    def _fetch_oceanic_track(self, letter: str, previous: Optional[Waypoint]) -> List[Waypoint]:
        routing = self.nattrak.get_active_routing(letter)
        if not routing:
            return []

        points = []
        for entry in routing.split():
            point = parse_track_coordinate(entry)
            if point is None:
                fixes = self.navdb.fixes(entry)
                if not fixes:
                    logger.debug(f'Track {letter} entry {entry} not in navigation database')
                    continue
                point = closest_fix(fixes, points[-1] if points else previous)
            points.append(point)
        return points
