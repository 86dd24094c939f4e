"""
Schema-generation adapters for the navigation database.

``detect_schema()`` inspects the connection once and returns the adapter
for its naming generation. Both adapters expose the same typed query
operations, so the resolver never sees a table or column name.
"""

import logging
from typing import List, Optional

from sqlalchemy import inspect, or_, select
from sqlalchemy.engine import Connection

from routewatch.models.navdb import NavTables, V1_TABLES, V2_TABLES, V2_MARKER_TABLE
from routewatch.models.route import Waypoint
from routewatch.navdb.procedures import ProcedureCandidate, ProcedureKind

logger = logging.getLogger(__name__)


class NavSchema:
    """
    Typed read-only queries over one navigation database generation.

    Subclasses only choose the table set; all queries are written against
    the generation-independent column keys.
    """

    generation: int = 0
    tables: NavTables = None

    def __init__(self, connection: Connection):
        self.connection = connection

    @property
    def fix_tables(self):
        """Fix lookup order: enroute, terminal, VOR, enroute NDB, terminal NDB."""
        t = self.tables
        return (
            t.enroute_waypoints,
            t.terminal_waypoints,
            t.vhf_navaids,
            t.enroute_ndbs,
            t.terminal_ndbs,
        )

    def _procedure_table(self, kind: ProcedureKind):
        return self.tables.sids if kind == ProcedureKind.SID else self.tables.stars

    def fixes(self, ident: str) -> List[Waypoint]:
        """All point records named ``ident``, in lookup-table order."""
        candidates = []
        for table in self.fix_tables:
            stmt = select(table.c.lat, table.c.lon).where(table.c.ident == ident)
            for lat, lon in self.connection.execute(stmt):
                candidates.append(Waypoint(ident, lat, lon))
        return candidates

    def airport(self, ident: str) -> Optional[Waypoint]:
        table = self.tables.airports
        stmt = select(table.c.lat, table.c.lon).where(table.c.ident == ident)
        row = self.connection.execute(stmt).first()
        if row is None:
            return None
        lat, lon = row
        return Waypoint(ident, lat, lon)

    def airway(self, route: str) -> List[Waypoint]:
        """Fixes along an airway, highest sequence number first."""
        table = self.tables.airways
        stmt = (
            select(table.c.ident, table.c.lat, table.c.lon)
            .where(table.c.route == route)
            .order_by(table.c.seqno.desc())
        )
        return [Waypoint(ident, lat, lon) for ident, lat, lon in self.connection.execute(stmt)]

    def procedure_candidates(self, kind: ProcedureKind, airport: str) -> List[ProcedureCandidate]:
        table = self._procedure_table(kind)
        stmt = (
            select(table.c.procedure, table.c.transition)
            .where(table.c.airport == airport)
            .distinct()
        )
        return [
            ProcedureCandidate(procedure, transition or None)
            for procedure, transition in self.connection.execute(stmt)
        ]

    def procedure_waypoints(
        self,
        kind: ProcedureKind,
        airport: str,
        procedure: str,
        transition: Optional[str],
    ) -> List[Waypoint]:
        """
        Waypoints of a procedure (common legs plus the chosen transition).

        Departures are flown from the runway outwards, which the database
        stores in descending sequence; arrivals ascend. Legs without
        coordinates (headings, altitude terminations) are dropped.
        """
        table = self._procedure_table(kind)
        order = table.c.seqno.desc() if kind == ProcedureKind.SID else table.c.seqno.asc()
        stmt = (
            select(table.c.ident, table.c.lat, table.c.lon)
            .where(table.c.airport == airport)
            .where(table.c.procedure == procedure)
            .where(or_(table.c.transition == (transition or ''), table.c.transition.is_(None)))
            .where(table.c.lat.is_not(None))
            .order_by(order)
        )
        return [Waypoint(ident, lat, lon) for ident, lat, lon in self.connection.execute(stmt)]


class NavSchemaV1(NavSchema):
    generation = 1
    tables = V1_TABLES


class NavSchemaV2(NavSchema):
    generation = 2
    tables = V2_TABLES


def detect_schema(connection: Connection) -> NavSchema:
    """Choose the adapter by the presence of the second-generation marker table."""
    if inspect(connection).has_table(V2_MARKER_TABLE):
        schema = NavSchemaV2(connection)
    else:
        schema = NavSchemaV1(connection)
    logger.info(f'Navigation database schema generation {schema.generation}')
    return schema
