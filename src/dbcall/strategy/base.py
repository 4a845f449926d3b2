"""
Base strategy interface for rendering routine calls.

A strategy turns the portable escaped call form (``{call N(?,?)}``) into
the native SQL a dialect understands, one argument at a time. The DB-API
callable statement drives it; nothing else in dbcall depends on dialect
details.
"""
from abc import ABC, abstractmethod

from dbcall.exceptions import QueryError

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['CallStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('postgresql')
        class PostgresStrategy(CallStrategy):
            ...
    """
    def decorator(cls: type['CallStrategy']) -> type['CallStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class CallStrategy(ABC):
    """Base class for dialect-specific call rendering.
    """

    supports_procedures: bool = True
    supports_named_arguments: bool = True

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier."""

    @property
    @abstractmethod
    def placeholder(self) -> str:
        """Return the DB-API placeholder for one positional argument."""

    @abstractmethod
    def type_name(self, type_code: int | None, struct: str | None = None) -> str | None:
        """Return the native type name for a type code, or None when unknown.
        """

    def render_argument(self, type_name: str | None = None, cast: bool = True) -> str:
        """Render the placeholder for one argument, cast to a type if known.
        """
        return self.placeholder

    def render_named_argument(self, name: str, rendered: str) -> str:
        """Render an argument in named notation.
        """
        if not self.supports_named_arguments:
            raise QueryError(f'{self.dialect_name} does not support named routine arguments')
        return f'{name} => {rendered}'

    def render_procedure(self, name: str, arguments: list[str]) -> str:
        """Render a procedure invocation.

        Args:
            name: Fully qualified procedure name
            arguments: Rendered argument placeholders in call order
        """
        if not self.supports_procedures:
            raise QueryError(f'{self.dialect_name} does not support stored procedures')
        return f'CALL {name}({", ".join(arguments)})'

    @abstractmethod
    def render_function(self, name: str, arguments: list[str]) -> str:
        """Render a function invocation returning at least one row.

        Args:
            name: Fully qualified function name
            arguments: Rendered argument placeholders in call order
        """
