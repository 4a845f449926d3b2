"""
Single-slot mutable value container.
"""
from typing import Any

__all__ = ['Value']


class Value:
    """Mutable holder for one datum, shared by reference.

    Output parameters hand a ``Value`` back to the caller at registration
    time; the registry writes the post-execution datum into that same
    object, so the caller observes it without another lookup.

    Equality and hashing are by identity: two cells holding equal data are
    still distinct cells.

    >>> cell = Value(5)
    >>> cell.get()
    5
    >>> cell.set('hi')
    >>> str(cell)
    'hi'
    >>> Value(1) == Value(1)
    False
    """

    __slots__ = ('value',)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __str__(self) -> str:
        return f'{self.value}'

    def __repr__(self) -> str:
        return f'Value({self.value!r})'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
