from collections.abc import Callable
from dataclasses import dataclass, fields
from typing import Any

import pandas as pd
import pyarrow as pa
from dbcall.strategy import get_available_dialects, is_supported_dialect

from libb import ConfigOptions, load_options

__all__ = [
    'CallOptions',
    'resolve_options',
    'iterdict_data_loader',
    'pandas_numpy_data_loader',
    'pandas_pyarrow_data_loader',
]


def iterdict_data_loader(data, columns, **kwargs) -> list[dict]:
    """Minimal data loader.

    Accepts additional keyword arguments for compatibility with other data
    loaders, but doesn't use them.
    """
    if not data:
        return []
    return list(data)


def pandas_numpy_data_loader(data, columns, **kwargs) -> pd.DataFrame:
    """Standard pandas DataFrame loader using NumPy.

    Always returns a DataFrame, with columns preserved for empty results.
    """
    if not data:
        return pd.DataFrame(columns=list(columns))
    return pd.DataFrame.from_records(list(data), columns=list(columns))


def pandas_pyarrow_data_loader(data, columns, **kwargs) -> pd.DataFrame:
    """PyArrow-based pandas DataFrame loader.

    Always returns a DataFrame, with columns preserved for empty results.
    """
    if not data:
        return pd.DataFrame(columns=list(columns))
    column_names = list(columns)
    columns_data = [[row[col] for row in data] for col in column_names]
    return pa.table(columns_data, names=column_names).to_pandas(types_mapper=pd.ArrowDtype)


@dataclass
class CallOptions(ConfigOptions):
    """Options for DB-API callable statements

    supported driver names: `postgresql`, `sqlite` (autodetected from the
    connection when left unset)

    - cast_types: Emit native casts for typed binds where the dialect allows
      it, so NULLs and overloaded routines resolve (default: True)
    - log_values: Include bound values in debug logging (default: True)
    - data_loader: Callable turning fetched rows into the caller's format,
      used by refcursor decoding (default: iterdict_data_loader)
    """
    drivername: str = None
    cast_types: bool = True
    log_values: bool = True
    data_loader: Callable[..., Any] | None = None

    def __post_init__(self):
        if self.drivername is not None and not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ValueError(f'drivername must be one of: {available}')
        if self.data_loader is None:
            self.data_loader = iterdict_data_loader


def resolve_options(options: 'CallOptions | dict[str, Any] | str | None' = None,
                    config: Any | None = None, **kw: Any) -> CallOptions:
    """Resolve options given as an object, dict, config name or keywords.
    """
    if isinstance(options, CallOptions):
        for field in fields(options):
            kw.pop(field.name, None)
        return options
    if options is None:
        return CallOptions(**kw)
    options_func = load_options(cls=CallOptions)(lambda o, c: o)
    return options_func(options, config, **kw)
