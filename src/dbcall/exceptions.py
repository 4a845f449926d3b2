"""
Exception classes for stored routine calls.
"""
import sqlite3

import psycopg


class DatabaseError(Exception):
    """Base class for all dbcall errors.
    """


class ValidationError(DatabaseError):
    """Error in caller input: bad identifiers, missing type codes, bad call arguments.
    """


class QueryError(DatabaseError):
    """Error in call string syntax or statement usage.
    """


ProgrammingError = (
    psycopg.ProgrammingError,
    psycopg.DatabaseError,
    sqlite3.ProgrammingError,
    sqlite3.DatabaseError,
    QueryError,
    )

OperationalError = (
    psycopg.OperationalError,
    sqlite3.OperationalError,
    )

IntegrityError = (
    psycopg.IntegrityError,
    sqlite3.IntegrityError,
    )
