"""
SQLAlchemy engine configuration for the navigation database.

Uses SQLAlchemy 2.0 style. The navigation database is read-only reference
data, opened through a single connection owned by the resolver worker.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from routewatch.config import config


def create_navdb_engine(url: str = None, echo: bool = False) -> Engine:
    """
    Create an engine for the navigation database.

    The resolver worker is the only user of the connection, but it is
    opened on the worker thread rather than the thread that built the
    engine, hence check_same_thread=False for SQLite.
    """
    url = url or config.navdb.url
    engine_kwargs = {'echo': echo}

    is_sqlite = url.startswith('sqlite')
    if is_sqlite:
        engine_kwargs['connect_args'] = {'check_same_thread': False}

    engine = create_engine(url, **engine_kwargs)

    if is_sqlite:
        @event.listens_for(engine, 'connect')
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Refuse writes; the navdata file is never modified."""
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA query_only=ON')
            cursor.close()

    return engine
