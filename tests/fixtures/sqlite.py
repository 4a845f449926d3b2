"""
SQLite fixtures.

SQLite has no stored procedures, but functions registered with
``create_function`` are callable through the function form of the call
string, which is enough to drive the whole registry lifecycle against a
real driver.
"""
import sqlite3

import pytest
import sqlalchemy as sa


def register_functions(raw_conn):
    """Register the test routines on a raw sqlite3 connection."""
    raw_conn.create_function('add_one', 1, lambda x: None if x is None else x + 1)
    raw_conn.create_function('greet', 2, lambda greeting, name: f'{greeting}, {name}')
    raw_conn.create_function('answer', 0, lambda: 42)
    raw_conn.create_function('today', 0, lambda: '2025-03-11')


@pytest.fixture
def sqlite_conn():
    """In-memory sqlite3 connection with the test functions registered."""
    conn = sqlite3.connect(':memory:')
    register_functions(conn)
    yield conn
    conn.close()


@pytest.fixture
def sa_sqlite_conn():
    """SQLAlchemy connection to an in-memory SQLite database."""
    engine = sa.create_engine('sqlite://')
    conn = engine.connect()
    register_functions(conn.connection.driver_connection)
    yield conn
    conn.close()
    engine.dispose()
