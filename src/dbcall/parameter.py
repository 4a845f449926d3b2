"""
Parameter record: the metadata bound for one routine parameter.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dbcall.value import Value

if TYPE_CHECKING:
    from dbcall.converters import Converter

__all__ = ['Parameter']


@dataclass(eq=True)
class Parameter:
    """Metadata for one bound parameter.

    Direction is implied by which cells are present: ``input`` makes it an
    input, ``output`` makes it an output, both make it in-out.

    Fields
        input: cell holding the datum bound before execution
        output: cell receiving the datum read after execution
        type: database type code, required for outputs
        struct: structured type name for user-defined output types
        encoder: converter applied to the input value before binding
        decoder: converter applied to the output value after reading
    """
    input: Value | None = None
    output: Value | None = None
    type: int | None = None
    struct: str | None = None
    encoder: 'Converter | None' = None
    decoder: 'Converter | None' = None

    @property
    def is_input(self) -> bool:
        return self.input is not None

    @property
    def is_output(self) -> bool:
        return self.output is not None

    @property
    def is_inout(self) -> bool:
        return self.is_input and self.is_output

    def __str__(self) -> str:
        return f'{self.input}/{self.output} ({self.type}/{self.struct})'
