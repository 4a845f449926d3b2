"""Low-level connection utilities with no internal dependencies.

These utilities work with any connection type (SQLAlchemy connections,
wrappers exposing ``dbapi_connection``, raw DBAPI connections) and import
nothing from other dbcall modules.
"""
from typing import Any

import sqlalchemy as sa


def get_dialect_name(obj: Any) -> str:
    """Get dialect name for a database connection or engine.
    """
    if hasattr(obj, 'dialect'):
        dialect = obj.dialect
        if isinstance(dialect, str):
            return dialect.lower()
        return str(dialect.name).lower()

    if hasattr(obj, 'engine') and hasattr(obj.engine, 'dialect'):
        return str(obj.engine.dialect.name).lower()

    if hasattr(obj, 'dbapi_connection'):
        return get_dialect_name(obj.dbapi_connection)

    if hasattr(obj, 'driver_connection'):
        return get_dialect_name(obj.driver_connection)

    type_name = f'{type(obj).__module__}.{type(obj).__name__}'
    if 'psycopg' in type_name:
        return 'postgresql'
    if 'sqlite3' in type_name:
        return 'sqlite'

    raise AttributeError(f'Cannot determine dialect for {type(obj)}')


def get_raw_connection(connection: Any) -> Any:
    """Extract the raw DBAPI connection from a wrapper.

    Unwraps SQLAlchemy ``Connection`` objects,
    pool proxies (``.driver_connection``) and wrappers exposing
    ``dbapi_connection``.
    """
    if isinstance(connection, sa.engine.Connection):
        return connection.connection.driver_connection
    raw_conn = connection
    if getattr(raw_conn, 'dbapi_connection', None) is not None:
        raw_conn = raw_conn.dbapi_connection
    if hasattr(raw_conn, 'driver_connection'):
        raw_conn = raw_conn.driver_connection
    return raw_conn
