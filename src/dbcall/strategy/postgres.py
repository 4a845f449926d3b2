"""
PostgreSQL-specific call rendering.

Procedures are invoked with ``CALL``; output and in-out arguments come back
as a single row named after the formal parameters. Functions are invoked as
``SELECT * FROM f(...)`` so that both scalar functions and functions with
OUT parameters produce a row with one column per output.
"""
from dbcall.strategy.base import CallStrategy, register_strategy
from dbcall.types import pg_type_name


@register_strategy('postgresql')
class PostgresStrategy(CallStrategy):
    """PostgreSQL call rendering.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for PostgreSQL."""
        return 'postgresql'

    @property
    def placeholder(self) -> str:
        return '%s'

    def type_name(self, type_code: int | None, struct: str | None = None) -> str | None:
        return pg_type_name(type_code, struct)

    def render_argument(self, type_name: str | None = None, cast: bool = True) -> str:
        """Render ``%s`` or ``%s::type``.

        Casting an untyped NULL lets PostgreSQL pick the right overload for
        OUT arguments, which are always sent as NULL.
        """
        if cast and type_name:
            return f'{self.placeholder}::{type_name}'
        return self.placeholder

    def render_function(self, name: str, arguments: list[str]) -> str:
        return f'SELECT * FROM {name}({", ".join(arguments)})'
