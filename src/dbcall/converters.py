"""
Encoders and decoders applied at the binding boundary.

A converter is anything with a ``perform(connection, value)`` method. The
registry runs encoders on input values right before binding and decoders on
output values right after reading. Plain callables taking
``(connection, value)`` are accepted too and wrapped by ``as_converter``.

Converters may call through to the connection (see ``RefCursorDecoder``)
but must not touch the registry that invokes them.
"""
import datetime
import json
import logging
import math
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import dateutil.parser
import numpy as np
import pandas as pd
from dbcall.options import CallOptions, resolve_options
from dbcall.utils import get_raw_connection

logger = logging.getLogger(__name__)

__all__ = [
    'Converter',
    'FunctionConverter',
    'as_converter',
    'NumpyEncoder',
    'JsonEncoder',
    'JsonDecoder',
    'DateDecoder',
    'DatetimeDecoder',
    'RefCursorDecoder',
]


@runtime_checkable
class Converter(Protocol):
    """Transform applied to a value at the binding boundary."""

    def perform(self, connection: Any, value: Any) -> Any:
        ...


class FunctionConverter:
    """Adapt a plain ``f(connection, value)`` callable to ``Converter``.
    """

    __slots__ = ('func',)

    def __init__(self, func: Callable[[Any, Any], Any]) -> None:
        self.func = func

    def perform(self, connection: Any, value: Any) -> Any:
        return self.func(connection, value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FunctionConverter):
            return self.func == other.func
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.func)

    def __repr__(self) -> str:
        return f'FunctionConverter({getattr(self.func, "__name__", self.func)!r})'


def as_converter(obj: Any) -> Converter | None:
    """Normalize a converter object or callable; ``None`` passes through.

    >>> as_converter(None) is None
    True
    >>> as_converter(lambda cn, v: v * 2).perform(None, 4)
    8
    """
    if obj is None:
        return None
    if isinstance(obj, Converter):
        return obj
    if callable(obj):
        return FunctionConverter(obj)
    raise TypeError(f'Converter must define perform(connection, value) or be callable, got {type(obj)}')


class NumpyEncoder:
    """Convert NumPy and pandas scalars to native Python values.

    NaN, NaT and pandas ``NA`` become ``None`` so they bind as SQL NULL.
    """

    def perform(self, connection: Any, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        if isinstance(value, np.floating) and np.isnan(value):
            return None
        if isinstance(value, np.datetime64):
            if np.isnat(value):
                return None
            return pd.Timestamp(value).to_pydatetime()
        if isinstance(value, (np.floating, np.integer, np.bool_)):
            return value.item()
        if pd.api.types.is_scalar(value) and pd.isna(value):
            return None
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        return value


class JsonEncoder:
    """Serialize an input value to JSON text."""

    def __init__(self, **dumps_kwargs: Any) -> None:
        self.dumps_kwargs = dumps_kwargs

    def perform(self, connection: Any, value: Any) -> str | None:
        if value is None:
            return None
        return json.dumps(value, **self.dumps_kwargs)


class JsonDecoder:
    """Parse JSON text read from an output parameter.

    Values the driver already decoded (dicts, lists) pass through.
    """

    def perform(self, connection: Any, value: Any) -> Any:
        if value is None or not isinstance(value, (str, bytes, bytearray)):
            return value
        return json.loads(value)


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return value.decode()
    return str(value)


class DatetimeDecoder:
    """Parse ISO 8601 text into ``datetime.datetime``."""

    def perform(self, connection: Any, value: Any) -> datetime.datetime | None:
        if value is None or isinstance(value, datetime.datetime):
            return value
        if isinstance(value, datetime.date):
            return datetime.datetime.combine(value, datetime.time())
        return dateutil.parser.isoparse(_as_text(value))


class DateDecoder:
    """Parse ISO 8601 text into ``datetime.date``."""

    def perform(self, connection: Any, value: Any) -> datetime.date | None:
        if value is None:
            return None
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        return dateutil.parser.isoparse(_as_text(value)).date()


class RefCursorDecoder:
    """Fetch the rows behind a PostgreSQL refcursor output.

    psycopg reads a ``refcursor`` output as the portal name. The decoder
    fetches every row from that portal on the same connection, which must
    still be inside the transaction that opened it, and hands the rows to a
    data loader: ``data_loader`` when given, otherwise the one configured in
    ``options`` (a ``CallOptions``, an options dict, or the name of a
    configuration entry in ``config``).
    """

    def __init__(self, data_loader: Callable[..., Any] | None = None,
                 options: CallOptions | dict[str, Any] | str | None = None,
                 config: Any | None = None) -> None:
        self.data_loader = data_loader or resolve_options(options, config).data_loader

    def perform(self, connection: Any, value: Any) -> Any:
        if value is None:
            return None
        name = getattr(value, 'name', value)
        raw_conn = get_raw_connection(connection)
        quoted = '"' + str(name).replace('"', '""') + '"'
        cursor = raw_conn.cursor()
        try:
            cursor.execute(f'FETCH ALL FROM {quoted}')
            columns = [desc[0] for desc in (cursor.description or [])]
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
        logger.debug(f'Fetched {len(rows)} rows from refcursor {name}')
        return self.data_loader(rows, columns)


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
