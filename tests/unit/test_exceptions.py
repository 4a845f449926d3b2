"""
Unit tests for the error hierarchy and driver error groups.
"""
import sqlite3

import psycopg
import pytest
from dbcall.exceptions import DatabaseError, IntegrityError, OperationalError
from dbcall.exceptions import ProgrammingError, QueryError, ValidationError


def test_hierarchy():
    """Test dbcall errors share one base"""
    assert issubclass(ValidationError, DatabaseError)
    assert issubclass(QueryError, DatabaseError)
    assert not issubclass(ValidationError, QueryError)


@pytest.mark.parametrize(('group', 'members'), [
    (ProgrammingError, [psycopg.ProgrammingError, sqlite3.ProgrammingError, QueryError]),
    (OperationalError, [psycopg.OperationalError, sqlite3.OperationalError]),
    (IntegrityError, [psycopg.IntegrityError, sqlite3.IntegrityError]),
])
def test_driver_groups(group, members):
    for exc in members:
        assert issubclass(exc, group)


def test_integrity_error_caught(sqlite_conn):
    """Test a constraint violation raised by the driver matches the group"""
    sqlite_conn.execute('create table t (id integer primary key)')
    sqlite_conn.execute('insert into t values (1)')
    with pytest.raises(IntegrityError):
        sqlite_conn.execute('insert into t values (1)')


def test_validation_error_not_in_driver_groups():
    assert not issubclass(ValidationError, ProgrammingError + OperationalError + IntegrityError)


if __name__ == '__main__':
    __import__('pytest').main([__file__])
