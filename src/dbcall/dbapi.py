"""
Callable statements on top of plain DB-API 2.0 connections.

PEP-249 has no notion of a callable statement, so this module provides one:
``prepare_call`` parses the portable escaped call form

    {call pkg.proc(?,?,?)}
    {? = call pkg.fn(?,?)}

and returns a ``DbapiCallableStatement`` that collects bindings, renders
native SQL through the dialect strategy on ``execute()`` and serves output
parameters from the first row the call returns.

Rendering rules:
- every positional placeholder becomes one argument, in placeholder order;
  in the procedure form output-only slots are sent as NULL (cast to the
  registered type when the dialect allows it), in the function form output-only
  slots and names are left out, since function calls take input arguments
  only;
- the function form's leading ``?`` is the return slot (index 1), so
  argument placeholders start at index 2;
- named bindings follow the positional ones in named notation; when no
  positional slot is bound at all, only named notation is emitted.

Reading rules:
- a positional output reads the column at its rank among the registered
  positional outputs (positional outputs come first in the row);
- a named output reads the column with that name.

The statement never commits; transaction control stays with the caller.
"""
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

from dbcall.exceptions import QueryError, ValidationError
from dbcall.options import CallOptions, resolve_options
from dbcall.strategy import CallStrategy, get_db_strategy, get_strategy
from dbcall.utils import get_raw_connection

logger = logging.getLogger(__name__)

__all__ = [
    'CallSpec',
    'parse_call_sql',
    'DbapiCallableStatement',
    'prepare_call',
]

_CALL_RE = re.compile(
    r'^\s*\{\s*(?P<ret>\?\s*=\s*)?call\s+(?P<name>[^\s(){}]+)\s*'
    r'(?:\((?P<args>[^()]*)\))?\s*\}\s*$',
    re.IGNORECASE,
)
_MASK = '***'


@dataclass(frozen=True)
class CallSpec:
    """Parsed escaped call string.

    ``parameters`` counts every placeholder, including a function's return
    slot.
    """
    name: str
    function: bool
    parameters: int

    @property
    def first_argument(self) -> int:
        """Index of the first placeholder passed as a routine argument."""
        return 2 if self.function else 1


def parse_call_sql(sql: str) -> CallSpec:
    """Parse ``{call N(?,...)}`` or ``{? = call N(?,...)}``.

    >>> parse_call_sql('{call pkg.proc(?,?)}')
    CallSpec(name='pkg.proc', function=False, parameters=2)
    >>> parse_call_sql('{? = call fn()}')
    CallSpec(name='fn', function=True, parameters=1)
    """
    match = _CALL_RE.match(sql or '')
    if match is None:
        raise QueryError(f'Not an escaped call string: {sql!r}')
    args = (match.group('args') or '').strip()
    count = 0
    if args:
        tokens = [token.strip() for token in args.split(',')]
        if any(token != '?' for token in tokens):
            raise QueryError(f'Only ? placeholders are supported as call arguments: {sql!r}')
        count = len(tokens)
    function = match.group('ret') is not None
    return CallSpec(match.group('name'), function, count + int(function))


@dataclass
class _Input:
    value: Any
    type: int | None = None


@dataclass
class _Output:
    type: int
    struct: str | None = None


class DbapiCallableStatement:
    """Callable statement emulated over a DB-API connection.

    Implements ``set_object``, ``register_out_parameter``, ``execute``,
    ``get_object`` and ``close`` with 1-based integer or string parameter
    identifiers.
    """

    def __init__(self, connection: Any, sql: str, options: CallOptions | None = None) -> None:
        self.connection = connection
        self.sql = sql
        self.call = parse_call_sql(sql)
        self.options = options or CallOptions()
        if self.options.drivername:
            self.strategy: CallStrategy = get_strategy(self.options.drivername)
        else:
            self.strategy = get_db_strategy(connection)
        self.closed = False
        self._inputs: dict[int | str, _Input] = {}
        self._outputs: dict[int | str, _Output] = {}
        self._row: tuple | None = None
        self._columns: list[str] = []
        self._executed = False

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.sql!r}, dialect={self.strategy.dialect_name!r})'

    def __str__(self) -> str:
        return self.sql

    def _check_open(self) -> None:
        if self.closed:
            raise QueryError(f'Statement is closed: {self.sql}')

    def _check_parameter(self, parameter: int | str) -> int | str:
        if isinstance(parameter, bool):
            raise ValidationError(f'Invalid parameter identifier: {parameter!r}')
        if isinstance(parameter, int):
            if not 1 <= parameter <= self.call.parameters:
                raise QueryError(f'Parameter index {parameter} out of range 1..{self.call.parameters} for {self.sql}')
            return parameter
        if isinstance(parameter, str) and parameter:
            return parameter
        raise ValidationError(f'Invalid parameter identifier: {parameter!r}')

    def set_object(self, parameter: int | str, value: Any, type: int | None = None) -> None:
        """Bind an input value at an index or name."""
        self._check_open()
        parameter = self._check_parameter(parameter)
        if self.call.function and parameter == 1:
            raise QueryError(f'Parameter 1 is the return value of {self.call.name} and cannot be an input')
        self._inputs[parameter] = _Input(value, type)

    def register_out_parameter(self, parameter: int | str, type: int,
                               struct: str | None = None) -> None:
        """Register an output parameter at an index or name."""
        self._check_open()
        parameter = self._check_parameter(parameter)
        self._outputs[parameter] = _Output(type, struct)

    def clear_parameters(self) -> None:
        """Forget every binding and the last result."""
        self._inputs.clear()
        self._outputs.clear()
        self._row = None
        self._columns = []
        self._executed = False

    def _render(self, parameter: int | str) -> tuple[str, Any]:
        """Render one argument and return it with its bound value."""
        cast = self.options.cast_types
        if parameter in self._inputs:
            bound = self._inputs[parameter]
            struct = self._outputs[parameter].struct if parameter in self._outputs else None
            type_name = self.strategy.type_name(bound.type, struct)
            return self.strategy.render_argument(type_name, cast), bound.value
        if parameter in self._outputs:
            out = self._outputs[parameter]
            type_name = self.strategy.type_name(out.type, out.struct)
            return self.strategy.render_argument(type_name, cast), None
        raise QueryError(f'Parameter {parameter} of {self.call.name} is not bound')

    def _output_only_argument(self, parameter: int | str) -> bool:
        return self.call.function and parameter in self._outputs and parameter not in self._inputs

    def render(self) -> tuple[str, list[Any]]:
        """Render the native SQL and argument list for the current bindings.
        """
        positional = range(self.call.first_argument, self.call.parameters + 1)
        named = [key for key in {**self._inputs, **self._outputs} if isinstance(key, str)]
        bound_positional = any(i in self._inputs or i in self._outputs for i in positional)

        arguments: list[str] = []
        params: list[Any] = []
        if bound_positional or not named:
            for i in positional:
                if self._output_only_argument(i):
                    continue
                rendered, value = self._render(i)
                arguments.append(rendered)
                params.append(value)
        for name in named:
            if self._output_only_argument(name):
                continue
            rendered, value = self._render(name)
            arguments.append(self.strategy.render_named_argument(name, rendered))
            params.append(value)

        if self.call.function:
            sql = self.strategy.render_function(self.call.name, arguments)
        else:
            sql = self.strategy.render_procedure(self.call.name, arguments)
        return sql, params

    def execute(self) -> bool:
        """Run the call; return True when it produced an output row.
        """
        self._check_open()
        sql, params = self.render()
        shown = params if self.options.log_values else [_MASK] * len(params)
        logger.debug(f'SQL:\n{sql}\nargs: {shown}')
        start = time.time()
        raw_conn = get_raw_connection(self.connection)
        cursor = raw_conn.cursor()
        try:
            cursor.execute(sql, params)
            if cursor.description:
                self._columns = [desc[0] for desc in cursor.description]
                self._row = cursor.fetchone()
            else:
                self._columns = []
                self._row = None
        except Exception:
            logger.error(f'Error with call:\nSQL:\n{sql}\nargs: {shown}')
            raise
        finally:
            cursor.close()
            logger.debug(f'Call time: {time.time() - start:.4f}s')
        self._executed = True
        return self._row is not None

    def _column_for(self, parameter: int | str) -> int:
        if isinstance(parameter, int):
            ranked = sorted(key for key in self._outputs if isinstance(key, int))
            return ranked.index(parameter)
        try:
            return self._columns.index(parameter)
        except ValueError:
            raise QueryError(f'Call result has no column {parameter!r}: {self._columns}') from None

    def get_object(self, parameter: int | str) -> Any:
        """Read an output parameter after ``execute()``."""
        self._check_open()
        parameter = self._check_parameter(parameter)
        if not self._executed:
            raise QueryError(f'Statement has not been executed: {self.sql}')
        if parameter not in self._outputs:
            raise QueryError(f'Parameter {parameter} is not registered as an output')
        if self._row is None:
            logger.debug(f'No output row for {self.call.name}; reading {parameter} as NULL')
            return None
        column = self._column_for(parameter)
        if column >= len(self._row):
            raise QueryError(f'Call result has {len(self._row)} columns, output {parameter} needs column {column + 1}')
        return self._row[column]

    def close(self) -> None:
        """Release bindings; the connection stays open."""
        if self.closed:
            return
        self.clear_parameters()
        self.closed = True


def prepare_call(connection: Any, sql: str,
                 options: 'CallOptions | dict[str, Any] | str | None' = None,
                 config: Any | None = None, **kw: Any) -> DbapiCallableStatement:
    """Prepare an escaped call string on a DB-API connection.

    Args:
        connection: psycopg or sqlite3 connection, a SQLAlchemy connection, or
                    a wrapper exposing ``dbapi_connection``
        sql: Escaped call string
        options: Can be:
                - CallOptions object
                - String name of a configuration entry in ``config``
                - Dictionary of options
                - None, with options given as keyword arguments
        config: Configuration object (for loading named options)
        **kw: Additional keyword arguments to override options

    Returns
        DbapiCallableStatement ready for binding
    """
    options = resolve_options(options, config, **kw)
    return DbapiCallableStatement(connection, sql, options)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
