"""
Dialect strategies, looked up by dialect name or from a connection.
"""
from functools import lru_cache

from dbcall.strategy.base import _STRATEGY_REGISTRY, CallStrategy
from dbcall.strategy.base import register_strategy
from dbcall.strategy.postgres import PostgresStrategy
from dbcall.strategy.sqlite import SQLiteStrategy
from dbcall.utils import get_dialect_name

__all__ = [
    'CallStrategy',
    'PostgresStrategy',
    'SQLiteStrategy',
    'register_strategy',
    'get_strategy',
    'get_db_strategy',
    'get_available_dialects',
    'is_supported_dialect',
]


@lru_cache(maxsize=None)
def get_strategy(dialect: str) -> CallStrategy:
    """Return the shared strategy instance for a dialect name.

    Raises ValueError for a dialect with no registered strategy.
    """
    if dialect not in _STRATEGY_REGISTRY:
        raise ValueError(f'Unsupported dialect: {dialect}. Available: {get_available_dialects()}')
    return _STRATEGY_REGISTRY[dialect]()


def get_db_strategy(cn) -> CallStrategy:
    """Return the strategy matching a connection's dialect."""
    return get_strategy(get_dialect_name(cn))


def get_available_dialects() -> list[str]:
    return sorted(_STRATEGY_REGISTRY)


def is_supported_dialect(dialect: str) -> bool:
    return dialect in _STRATEGY_REGISTRY
