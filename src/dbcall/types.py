"""
Database type codes for parameter binding.

The registry and statement adapter treat type codes as opaque integers and
forward them unchanged. ``SqlType`` collects the conventional codes used by
callable-statement drivers so callers don't have to hard-code numbers, and
the name maps below let the DB-API driver layer turn a code into a native
type name for casts.
"""
from enum import IntEnum

__all__ = ['SqlType', 'pg_type_name', 'sqlite_type_name']


class SqlType(IntEnum):
    """Conventional callable-statement type codes."""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    BOOLEAN = 16
    NCHAR = -15
    NVARCHAR = -9
    NCLOB = 2011
    REF_CURSOR = 2012
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014


postgres_type_names: dict[int, str] = {
    SqlType.BIT: 'boolean',
    SqlType.BOOLEAN: 'boolean',
    SqlType.TINYINT: 'smallint',
    SqlType.SMALLINT: 'smallint',
    SqlType.INTEGER: 'integer',
    SqlType.BIGINT: 'bigint',
    SqlType.FLOAT: 'double precision',
    SqlType.DOUBLE: 'double precision',
    SqlType.REAL: 'real',
    SqlType.NUMERIC: 'numeric',
    SqlType.DECIMAL: 'numeric',
    SqlType.CHAR: 'char',
    SqlType.NCHAR: 'char',
    SqlType.VARCHAR: 'varchar',
    SqlType.NVARCHAR: 'varchar',
    SqlType.LONGVARCHAR: 'text',
    SqlType.CLOB: 'text',
    SqlType.NCLOB: 'text',
    SqlType.DATE: 'date',
    SqlType.TIME: 'time',
    SqlType.TIME_WITH_TIMEZONE: 'timetz',
    SqlType.TIMESTAMP: 'timestamp',
    SqlType.TIMESTAMP_WITH_TIMEZONE: 'timestamptz',
    SqlType.BINARY: 'bytea',
    SqlType.VARBINARY: 'bytea',
    SqlType.LONGVARBINARY: 'bytea',
    SqlType.BLOB: 'bytea',
    SqlType.REF_CURSOR: 'refcursor',
}

sqlite_type_names: dict[int, str] = {
    SqlType.BIT: 'INTEGER',
    SqlType.BOOLEAN: 'INTEGER',
    SqlType.TINYINT: 'INTEGER',
    SqlType.SMALLINT: 'INTEGER',
    SqlType.INTEGER: 'INTEGER',
    SqlType.BIGINT: 'INTEGER',
    SqlType.FLOAT: 'REAL',
    SqlType.DOUBLE: 'REAL',
    SqlType.REAL: 'REAL',
    SqlType.NUMERIC: 'NUMERIC',
    SqlType.DECIMAL: 'NUMERIC',
    SqlType.CHAR: 'TEXT',
    SqlType.NCHAR: 'TEXT',
    SqlType.VARCHAR: 'TEXT',
    SqlType.NVARCHAR: 'TEXT',
    SqlType.LONGVARCHAR: 'TEXT',
    SqlType.CLOB: 'TEXT',
    SqlType.NCLOB: 'TEXT',
    SqlType.DATE: 'TEXT',
    SqlType.TIME: 'TEXT',
    SqlType.TIMESTAMP: 'TEXT',
    SqlType.BINARY: 'BLOB',
    SqlType.VARBINARY: 'BLOB',
    SqlType.LONGVARBINARY: 'BLOB',
    SqlType.BLOB: 'BLOB',
}


def pg_type_name(code: int | None, struct: str | None = None) -> str | None:
    """Return the PostgreSQL type name for a type code.

    A structured type name wins over the code, since it names the exact
    user-defined type the routine declares.
    """
    if struct:
        return struct
    if code is None:
        return None
    return postgres_type_names.get(code)


def sqlite_type_name(code: int | None) -> str | None:
    """Return the SQLite storage class for a type code."""
    if code is None:
        return None
    return sqlite_type_names.get(code)
