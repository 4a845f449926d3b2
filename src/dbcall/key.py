"""
Parameter identifiers for callable statements.

A parameter is addressed either by its 1-based placeholder position
(``Index``) or by the routine's formal parameter name (``Name``). The two
variants never compare equal to each other, so ``Index(1)`` and
``Name('1')`` are different keys.
"""
from dataclasses import dataclass
from typing import Any

from dbcall.exceptions import ValidationError

__all__ = ['ParameterKey', 'Index', 'Name', 'as_key']


class ParameterKey:
    """Base class for parameter identifiers.
    """

    __slots__ = ()

    @property
    def is_index(self) -> bool:
        return isinstance(self, Index)

    @property
    def is_name(self) -> bool:
        return isinstance(self, Name)

    @property
    def value(self) -> int | str:
        """Return the raw payload (index or name)."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Index(ParameterKey):
    """Positional identifier (1-based).

    >>> Index(2)
    Index(index=2)
    >>> str(Index(2))
    '2 (index-based)'
    """
    index: int

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise ValidationError(f'Parameter index must be an integer, got {self.index!r}')
        if self.index < 1:
            raise ValidationError(f'Parameter index must be positive, got {self.index}')

    @property
    def value(self) -> int:
        return self.index

    def __str__(self) -> str:
        return f'{self.index} (index-based)'


@dataclass(frozen=True, slots=True)
class Name(ParameterKey):
    """Nominal identifier.

    >>> str(Name('out'))
    'out (name-based)'
    """
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise ValidationError(f'Parameter name must be a string, got {self.name!r}')
        if not self.name:
            raise ValidationError('Parameter name must not be empty')

    @property
    def value(self) -> str:
        return self.name

    def __str__(self) -> str:
        return f'{self.name} (name-based)'


def as_key(key: Any) -> ParameterKey:
    """Coerce an int, str or existing key into a ``ParameterKey``.

    >>> as_key(1)
    Index(index=1)
    >>> as_key('a')
    Name(name='a')
    >>> as_key(Name('a')) == Name('a')
    True
    """
    if isinstance(key, ParameterKey):
        return key
    if isinstance(key, bool):
        raise ValidationError(f'Invalid parameter identifier: {key!r}')
    if isinstance(key, int):
        return Index(key)
    if isinstance(key, str):
        return Name(key)
    raise ValidationError(f'Invalid parameter identifier: {key!r}')


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
