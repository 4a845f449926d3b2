"""
Callable statement adapter.

``Statement`` wraps a prepared callable statement and exposes
direction-aware bind and read operations that dispatch on the parameter
identifier: positional keys go to the driver by integer index, nominal keys
by name. Type codes are forwarded opaquely.

A statement is built either around an already-prepared callable statement

    stmt = Statement(cn.prepare_call('{call pkg.proc(?,?)}'))

or through the factories, which synthesize the escaped call string and
prepare it on the connection

    with Statement.create_procedure(cn, 'pkg.proc', 2) as stmt:
        ...
"""
import logging
import time
from functools import wraps
from typing import Any, Protocol, Self, runtime_checkable

from dbcall.dbapi import _MASK, DbapiCallableStatement, prepare_call
from dbcall.exceptions import ValidationError
from dbcall.key import ParameterKey, as_key

logger = logging.getLogger(__name__)

__all__ = [
    'CallableStatement',
    'Statement',
    'make_call_sql',
    'create_procedure',
    'create_function',
]


@runtime_checkable
class CallableStatement(Protocol):
    """Driver-level callable statement consumed by ``Statement``.

    Parameters are addressed by 1-based index (``int``) or by name (``str``).
    """

    def execute(self) -> Any:
        ...

    def set_object(self, parameter: int | str, value: Any, type: int | None = None) -> None:
        ...

    def register_out_parameter(self, parameter: int | str, type: int,
                               struct: str | None = None) -> None:
        ...

    def get_object(self, parameter: int | str) -> Any:
        ...

    def close(self) -> None:
        ...


def _placeholders(number: int) -> str:
    return ','.join('?' * number)


def make_call_sql(name: str, parameters: int, function: bool = False) -> str:
    """Synthesize the escaped call string for a routine.

    For a function the leading ``?`` is the return value and counts toward
    ``parameters``.

    >>> make_call_sql('pkg.proc', 0)
    '{call pkg.proc()}'
    >>> make_call_sql('pkg.proc', 3)
    '{call pkg.proc(?,?,?)}'
    >>> make_call_sql('pkg.fn', 1, function=True)
    '{? = call pkg.fn()}'
    >>> make_call_sql('pkg.fn', 4, function=True)
    '{? = call pkg.fn(?,?,?)}'
    """
    if not name or not isinstance(name, str):
        raise ValidationError(f'Routine name must be a non-empty string, got {name!r}')
    if isinstance(parameters, bool) or not isinstance(parameters, int) or parameters < 0:
        raise ValidationError(f'Parameter count must be a non-negative integer, got {parameters!r}')
    if function:
        if parameters < 1:
            raise ValidationError('A function call needs at least one parameter for its return value')
        return f'{{? = call {name}({_placeholders(parameters - 1)})}}'
    return f'{{call {name}({_placeholders(parameters)})}}'


def _prepare(connection: Any, sql: str) -> CallableStatement:
    """Prepare a call on the connection, falling back to the DB-API emulation."""
    if hasattr(connection, 'prepare_call'):
        return connection.prepare_call(sql)
    return prepare_call(connection, sql)


def _loggable_args(statement: 'Statement', name: str, args: tuple) -> tuple:
    """Mask the bound value when the DB-API statement hides values."""
    base = statement.base
    if name != 'bind_input' or len(args) < 2:
        return args
    if isinstance(base, DbapiCallableStatement) and not base.options.log_values:
        return (args[0], _MASK, *args[2:])
    return args


def dumpcall(func):
    """Decorator for logging and timing statement operations.

    Bound values follow ``CallOptions.log_values`` when the underlying
    statement is a ``DbapiCallableStatement``; other drivers are logged as is.
    """
    @wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any):
        start = time.time()
        shown = _loggable_args(self, func.__name__, args)
        logger.debug(f'{func.__name__} on {self}\nargs: {shown}')
        try:
            return func(self, *args, **kwargs)
        except Exception:
            logger.error(f'Error in {func.__name__} on {self.sql or self.base}\nargs: {shown}')
            raise
        finally:
            elapsed = time.time() - start
            self.addcall(elapsed)
            logger.debug(f'{func.__name__} time: {elapsed:.4f}s')
    return wrapper


class Statement:
    """Direction-aware adapter around a driver callable statement.

    The adapter owns the underlying statement only when it prepared it
    itself (``create_procedure``/``create_function``); ``close()`` and the
    context manager release it in that case and leave externally supplied
    statements alone.
    """

    def __init__(self, base: CallableStatement, sql: str | None = None,
                 owns_base: bool = False) -> None:
        """Initialize statement adapter.

        Args:
            base: The underlying prepared callable statement
            sql: Call string the statement was prepared from, if known
            owns_base: Whether closing the adapter closes the base statement
        """
        self.base = base
        self.sql = sql
        self.owns_base = owns_base
        self.calls = 0
        self.time = 0

    @classmethod
    def prepare(cls, connection: Any, sql: str) -> Self:
        """Prepare ``sql`` on the connection and own the resulting statement.
        """
        logger.debug(f'Preparing call: {sql}')
        return cls(_prepare(connection, sql), sql=sql, owns_base=True)

    @classmethod
    def create_procedure(cls, connection: Any, name: str, parameters: int) -> Self:
        """Create a statement calling procedure ``name`` with ``parameters`` placeholders.
        """
        return cls.prepare(connection, make_call_sql(name, parameters))

    @classmethod
    def create_function(cls, connection: Any, name: str, parameters: int) -> Self:
        """Create a statement calling function ``name``.

        ``parameters`` includes the return value slot at index 1.
        """
        return cls.prepare(connection, make_call_sql(name, parameters, function=True))

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    def __str__(self) -> str:
        return self.sql or str(self.base)

    def addcall(self, elapsed: float) -> None:
        """Track execution statistics
        """
        self.time += elapsed
        self.calls += 1

    def close(self, force: bool = False) -> None:
        """Close the underlying statement if owned (or when forced).
        """
        if not (self.owns_base or force):
            return
        self.base.close()
        logger.debug(f'Statement closed: {self.calls} calls in {self.time:.4f}s')

    @dumpcall
    def execute(self) -> Any:
        """Invoke the underlying statement once."""
        return self.base.execute()

    @dumpcall
    def bind_input(self, key: ParameterKey | int | str, value: Any,
                   type: int | None = None) -> None:
        """Bind an input value, with an explicit type code when given.
        """
        key = as_key(key)
        if type is None:
            self.base.set_object(key.value, value)
        else:
            self.base.set_object(key.value, value, type)

    @dumpcall
    def bind_output(self, key: ParameterKey | int | str, type: int,
                    struct: str | None = None) -> None:
        """Register an out-parameter, with a structured type name when given.
        """
        key = as_key(key)
        if struct is None:
            self.base.register_out_parameter(key.value, type)
        else:
            self.base.register_out_parameter(key.value, type, struct)

    @dumpcall
    def read_output(self, key: ParameterKey | int | str) -> Any:
        """Read the current value of the out-parameter at ``key``.
        """
        return self.base.get_object(as_key(key).value)


def create_procedure(connection: Any, name: str, parameters: int) -> Statement:
    """Create a statement for a stored procedure.
    """
    return Statement.create_procedure(connection, name, parameters)


def create_function(connection: Any, name: str, parameters: int) -> Statement:
    """Create a statement for a stored function.
    """
    return Statement.create_function(connection, name, parameters)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
