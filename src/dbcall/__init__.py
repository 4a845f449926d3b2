"""
Stored routine calls with a parameter registry.

Register inputs and outputs once, then move them across a callable
statement around each execution:

    import dbcall

    reg = dbcall.Registry()
    reg.register_input(1, dbcall.Value(42), dbcall.SqlType.INTEGER)
    result = reg.register_output('result', dbcall.SqlType.VARCHAR)

    with dbcall.create_procedure(cn, 'pkg.proc', 2) as stmt:
        reg.run(cn, stmt)

    result.get()

Connections that provide ``prepare_call(sql)`` are used as-is; plain DB-API
connections (psycopg, sqlite3, SQLAlchemy) go through ``dbcall.dbapi``.
"""
__version__ = '0.1.0'

from dbcall.converters import Converter, DateDecoder, DatetimeDecoder
from dbcall.converters import FunctionConverter, JsonDecoder, JsonEncoder
from dbcall.converters import NumpyEncoder, RefCursorDecoder, as_converter
from dbcall.dbapi import DbapiCallableStatement, prepare_call
from dbcall.exceptions import DatabaseError, IntegrityError, OperationalError
from dbcall.exceptions import ProgrammingError, QueryError, ValidationError
from dbcall.key import Index, Name, ParameterKey, as_key
from dbcall.options import CallOptions
from dbcall.parameter import Parameter
from dbcall.registry import Registry
from dbcall.statement import CallableStatement, Statement, create_function
from dbcall.statement import create_procedure, make_call_sql
from dbcall.types import SqlType
from dbcall.value import Value

__all__ = [
    'Registry',
    'Statement',
    'CallableStatement',
    'create_procedure',
    'create_function',
    'make_call_sql',
    'prepare_call',
    'DbapiCallableStatement',
    'CallOptions',
    'Parameter',
    'ParameterKey',
    'Index',
    'Name',
    'as_key',
    'Value',
    'SqlType',
    'Converter',
    'FunctionConverter',
    'as_converter',
    'NumpyEncoder',
    'JsonEncoder',
    'JsonDecoder',
    'DateDecoder',
    'DatetimeDecoder',
    'RefCursorDecoder',
    'DatabaseError',
    'ValidationError',
    'QueryError',
    'ProgrammingError',
    'OperationalError',
    'IntegrityError',
]
