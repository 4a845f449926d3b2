"""
SQLite-specific call rendering.

SQLite has no stored procedures and no named routine arguments. Functions
registered on the connection with ``create_function`` are callable as
scalar expressions, which is what the function form renders to.
"""
from dbcall.strategy.base import CallStrategy, register_strategy
from dbcall.types import sqlite_type_name


@register_strategy('sqlite')
class SQLiteStrategy(CallStrategy):
    """SQLite call rendering.
    """

    supports_procedures = False
    supports_named_arguments = False

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for SQLite."""
        return 'sqlite'

    @property
    def placeholder(self) -> str:
        return '?'

    def type_name(self, type_code: int | None, struct: str | None = None) -> str | None:
        return sqlite_type_name(type_code)

    def render_argument(self, type_name: str | None = None, cast: bool = True) -> str:
        """Render ``?`` or ``CAST(? AS type)``."""
        if cast and type_name:
            return f'CAST({self.placeholder} AS {type_name})'
        return self.placeholder

    def render_function(self, name: str, arguments: list[str]) -> str:
        return f'SELECT {name}({", ".join(arguments)})'
