"""
Navigation database table definitions.

The navigation database ships in two table/column naming generations.
Both are described here as SQLAlchemy Core tables whose column *keys* are
identical across generations while the column *names* differ, so query
code can address ``table.c.ident`` regardless of which file is loaded.

Logical column keys:
    point tables:     ident, lat, lon
    procedure tables: airport, procedure, transition, seqno, ident, lat, lon
    airway table:     route, seqno, ident, lat, lon

The database is read-only reference data; these definitions are only used
to create tables when building fixture databases.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Column, Float, Integer, MetaData, String, Table

# Presence of this table marks a second-generation database
V2_MARKER_TABLE = 'tbl_hdr_header'


@dataclass(frozen=True)
class NavTables:
    """One schema generation's tables, addressed by logical role."""
    metadata: MetaData
    enroute_waypoints: Table
    terminal_waypoints: Table
    vhf_navaids: Table
    enroute_ndbs: Table
    terminal_ndbs: Table
    airports: Table
    sids: Table
    stars: Table
    airways: Table
    marker: Optional[Table] = None


def _point_table(metadata: MetaData, name: str, prefix: str, lat_name: str = None,
                 lon_name: str = None) -> Table:
    return Table(
        name, metadata,
        Column(f'{prefix}_identifier', String(5), key='ident', index=True),
        Column(lat_name or f'{prefix}_latitude', Float, key='lat'),
        Column(lon_name or f'{prefix}_longitude', Float, key='lon'),
    )


def _procedure_table(metadata: MetaData, name: str) -> Table:
    return Table(
        name, metadata,
        Column('airport_identifier', String(4), key='airport', index=True),
        Column('procedure_identifier', String(6), key='procedure'),
        Column('transition_identifier', String(5), key='transition', nullable=True),
        Column('seqno', Integer, key='seqno'),
        Column('waypoint_identifier', String(5), key='ident'),
        Column('waypoint_latitude', Float, key='lat', nullable=True),
        Column('waypoint_longitude', Float, key='lon', nullable=True),
    )


def _airway_table(metadata: MetaData, name: str) -> Table:
    return Table(
        name, metadata,
        Column('route_identifier', String(6), key='route', index=True),
        Column('seqno', Integer, key='seqno'),
        Column('waypoint_identifier', String(5), key='ident'),
        Column('waypoint_latitude', Float, key='lat'),
        Column('waypoint_longitude', Float, key='lon'),
    )


def build_v1_tables() -> NavTables:
    """First-generation naming: tbl_<role>, per-type column prefixes."""
    metadata = MetaData()
    return NavTables(
        metadata=metadata,
        enroute_waypoints=_point_table(metadata, 'tbl_enroute_waypoints', 'waypoint'),
        terminal_waypoints=_point_table(metadata, 'tbl_terminal_waypoints', 'waypoint'),
        vhf_navaids=_point_table(metadata, 'tbl_vhfnavaids', 'vor'),
        enroute_ndbs=_point_table(metadata, 'tbl_enroute_ndbnavaids', 'ndb'),
        terminal_ndbs=_point_table(metadata, 'tbl_terminal_ndbnavaids', 'ndb'),
        airports=_point_table(
            metadata, 'tbl_airports', 'airport',
            lat_name='airport_ref_latitude', lon_name='airport_ref_longitude',
        ),
        sids=_procedure_table(metadata, 'tbl_sids'),
        stars=_procedure_table(metadata, 'tbl_stars'),
        airways=_airway_table(metadata, 'tbl_enroute_airways'),
    )


def build_v2_tables() -> NavTables:
    """Second-generation naming: ARINC section codes in table names, navaid_* columns."""
    metadata = MetaData()
    marker = Table(
        V2_MARKER_TABLE, metadata,
        Column('version', String(16)),
        Column('arincversion', String(16)),
    )
    return NavTables(
        metadata=metadata,
        enroute_waypoints=_point_table(metadata, 'tbl_ea_enroute_waypoints', 'waypoint'),
        terminal_waypoints=_point_table(metadata, 'tbl_pc_terminal_waypoints', 'waypoint'),
        vhf_navaids=_point_table(metadata, 'tbl_d_vhfnavaids', 'navaid'),
        enroute_ndbs=_point_table(metadata, 'tbl_db_enroute_ndbnavaids', 'navaid'),
        terminal_ndbs=_point_table(metadata, 'tbl_pn_terminal_ndbnavaids', 'navaid'),
        airports=_point_table(
            metadata, 'tbl_pa_airports', 'airport',
            lat_name='airport_ref_latitude', lon_name='airport_ref_longitude',
        ),
        sids=_procedure_table(metadata, 'tbl_pd_sids'),
        stars=_procedure_table(metadata, 'tbl_pe_stars'),
        airways=_airway_table(metadata, 'tbl_er_enroute_airways'),
        marker=marker,
    )


V1_TABLES = build_v1_tables()
V2_TABLES = build_v2_tables()
