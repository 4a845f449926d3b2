"""
Parameter registry and binding lifecycle.

A ``Registry`` records the parameters of one routine call and moves them
across the statement boundary:

    reg = Registry()
    reg.register_input(1, Value(42), SqlType.INTEGER)
    total = reg.register_output('total', SqlType.NUMERIC)

    with create_procedure(cn, 'billing.close_day', 2) as stmt:
        reg.apply_all(cn, stmt)
        stmt.execute()
        reg.read_all(cn, stmt)

    total.get()

Positional parameters are processed in ascending index order, followed by
named parameters in registration order. Registering an identifier twice
merges into the existing record: cells are replaced only when supplied,
everything else is overwritten.
"""
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from dbcall.converters import Converter, as_converter
from dbcall.exceptions import ValidationError
from dbcall.key import Index, Name, ParameterKey, as_key
from dbcall.parameter import Parameter
from dbcall.value import Value

from libb import attrdict

if TYPE_CHECKING:
    from dbcall.statement import Statement

logger = logging.getLogger(__name__)

__all__ = ['Registry']


def _check_type(type: Any, required: bool) -> None:
    if type is None:
        if required:
            raise ValidationError('Output parameters require a type code')
        return
    if isinstance(type, bool) or not isinstance(type, int):
        raise ValidationError(f'Type code must be an integer, got {type!r}')


def _as_cell(value: Any) -> Value:
    if isinstance(value, Value):
        return value
    return Value(value)


class Registry:
    """Ordered collection of parameter records keyed by identifier.

    Not thread-safe: a registry and its statement belong to one caller at a
    time.
    """

    def __init__(self) -> None:
        self._positional: dict[Index, Parameter] = {}
        self._nominal: dict[Name, Parameter] = {}

    def _table(self, key: ParameterKey) -> dict:
        return self._positional if isinstance(key, Index) else self._nominal

    def _merge(self, key: ParameterKey, input: Value | None, output: Value | None,
               type: int | None, struct: str | None, encoder: Converter | None,
               decoder: Converter | None) -> Parameter:
        """Insert a new record or merge into the existing one.

        Cells are replaced only when supplied; type, struct, encoder and
        decoder always take the supplied values.
        """
        table = self._table(key)
        parameter = table.get(key)
        if output is not None or (parameter is not None and parameter.is_output):
            _check_type(type, required=True)
        if parameter is None:
            if input is None and output is None:
                raise ValidationError(f'Parameter {key} must be an input, an output or both')
            parameter = Parameter(input=input, output=output)
            table[key] = parameter
        else:
            if input is not None:
                parameter.input = input
            if output is not None:
                parameter.output = output
        parameter.type = type
        parameter.struct = struct
        parameter.encoder = encoder
        parameter.decoder = decoder
        return parameter

    def register_input(self, key: ParameterKey | int | str, value: Any = None,
                       type: int | None = None, encoder: Any = None) -> Value:
        """Register an input parameter.

        Args:
            key: Parameter index (1-based) or name
            value: Cell holding the datum to bind; any other object is wrapped
                   in a new ``Value``
            type: Database type code, optional for inputs
            encoder: Converter or ``f(connection, value)`` run before binding

        Returns
            The input cell, so the caller can change the value before the
            next ``apply_all``
        """
        key = as_key(key)
        _check_type(type, required=False)
        cell = _as_cell(value)
        self._merge(key, cell, None, type, None, as_converter(encoder), None)
        logger.debug(f'Registered input {key}: {cell.get()!r} (type={type})')
        return cell

    in_ = register_input

    def register_output(self, key: ParameterKey | int | str, type: int,
                        struct: str | None = None, decoder: Any = None,
                        cell: Value | None = None) -> Value:
        """Register an output parameter and return its output cell.

        A new cell is created on every call unless ``cell`` is given, in
        which case that cell receives the output (pass the input cell to
        read an in-out value back into the same object).

        Raises ValidationError if ``type`` is missing.
        """
        key = as_key(key)
        _check_type(type, required=True)
        if cell is not None and not isinstance(cell, Value):
            raise ValidationError(f'Output cell must be a Value, got {cell.__class__.__name__}')
        output = cell if cell is not None else Value()
        self._merge(key, None, output, type, struct, None, as_converter(decoder))
        logger.debug(f'Registered output {key} (type={type}, struct={struct})')
        return output

    out = register_output

    def register_inout(self, key: ParameterKey | int | str, value: Any, type: int,
                       struct: str | None = None, encoder: Any = None,
                       decoder: Any = None) -> Value:
        """Register an in-out parameter whose input and output share one cell.
        """
        key = as_key(key)
        _check_type(type, required=True)
        cell = _as_cell(value)
        self._merge(key, cell, cell, type, struct, as_converter(encoder), as_converter(decoder))
        logger.debug(f'Registered in-out {key}: {cell.get()!r} (type={type}, struct={struct})')
        return cell

    def get(self, key: ParameterKey | int | str) -> Parameter | None:
        """Return the record for ``key`` or None."""
        key = as_key(key)
        if key in self._positional:
            return self._positional[key]
        return self._nominal.get(key)

    def remove(self, key: ParameterKey | int | str) -> None:
        """Remove the record for ``key``; no-op when absent."""
        key = as_key(key)
        self._positional.pop(key, None)
        self._nominal.pop(key, None)

    def clear(self) -> None:
        """Remove every record."""
        self._positional.clear()
        self._nominal.clear()

    def keys(self) -> list[ParameterKey]:
        """Snapshot of identifiers: indexes ascending, then names in registration order."""
        return sorted(self._positional, key=lambda k: k.index) + list(self._nominal)

    def items(self) -> list[tuple[ParameterKey, Parameter]]:
        """Snapshot of (identifier, record) pairs in canonical order."""
        return [(key, self.get(key)) for key in self.keys()]

    def count(self) -> int:
        return len(self._positional) + len(self._nominal)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[ParameterKey]:
        return iter(self.keys())

    def __str__(self) -> str:
        return ', '.join(f'{key} = {parameter}' for key, parameter in self.items())

    def __repr__(self) -> str:
        return f'Registry({self})'

    def apply_all(self, connection: Any, statement: 'Statement') -> None:
        """Bind every record to the statement before execution.

        Inputs are encoded (once) and bound with their type code; outputs
        are registered with their type code and structured type name.
        Encoder and driver errors propagate and stop the loop at the
        offending record.
        """
        for key, parameter in self.items():
            if parameter.input is not None:
                value = parameter.input.get()
                if parameter.encoder is not None:
                    value = parameter.encoder.perform(connection, value)
                statement.bind_input(key, value, parameter.type)
            if parameter.output is not None:
                statement.bind_output(key, parameter.type, parameter.struct)
        logger.debug(f'Applied {self.count()} parameters to {statement}')

    def read_all(self, connection: Any, statement: 'Statement') -> None:
        """Read every output back from the executed statement into its cell.
        """
        outputs = 0
        for key, parameter in self.items():
            if parameter.output is None:
                continue
            value = statement.read_output(key)
            if parameter.decoder is not None:
                value = parameter.decoder.perform(connection, value)
            parameter.output.set(value)
            outputs += 1
        logger.debug(f'Read {outputs} outputs from {statement}')

    def run(self, connection: Any, statement: 'Statement') -> Any:
        """Apply, execute and read back in one go; returns the execute result.
        """
        self.apply_all(connection, statement)
        result = statement.execute()
        self.read_all(connection, statement)
        return result

    def outputs(self) -> attrdict:
        """Current output values keyed by index or name.
        """
        return attrdict({key.value: parameter.output.get()
                         for key, parameter in self.items()
                         if parameter.output is not None})
