"""
Fake callable statements and connections for unit tests.

``RecordingStatement`` implements the driver-level callable statement
interface and records every call verbatim, including whether the optional
type/struct argument was passed at all, so tests can check the adapter's
dispatch.

Usage:
    def test_bind(recording_statement):
        stmt = Statement(recording_statement)
        stmt.bind_input(1, 42)
        assert recording_statement.calls == [('set_object', 1, 42)]
"""
import pytest


class RecordingStatement:
    """Callable statement that records calls and serves canned outputs.
    """

    def __init__(self, outputs=None):
        self.outputs = dict(outputs or {})
        self.calls = []
        self.closed = False

    def execute(self):
        self.calls.append(('execute',))
        return True

    def set_object(self, parameter, value, *type):
        self.calls.append(('set_object', parameter, value, *type))

    def register_out_parameter(self, parameter, type, *struct):
        self.calls.append(('register_out_parameter', parameter, type, *struct))

    def get_object(self, parameter):
        self.calls.append(('get_object', parameter))
        return self.outputs.get(parameter)

    def close(self):
        self.closed = True

    def bound(self, name):
        """Return recorded calls of one kind without the call name."""
        return [call[1:] for call in self.calls if call[0] == name]


class PreparingConnection:
    """Connection that prepares ``RecordingStatement`` objects.
    """

    def __init__(self, outputs=None):
        self.outputs = outputs
        self.prepared = []

    def prepare_call(self, sql):
        statement = RecordingStatement(self.outputs)
        self.prepared.append((sql, statement))
        return statement


@pytest.fixture
def recording_statement():
    """Fresh recording callable statement with no canned outputs."""
    return RecordingStatement()


@pytest.fixture
def create_recording_statement():
    """Factory for recording statements with canned outputs.

    Example usage:
        def test_read(create_recording_statement):
            base = create_recording_statement({'out': 'hi'})
    """
    def factory(outputs=None):
        return RecordingStatement(outputs)

    return factory


@pytest.fixture
def preparing_connection():
    """Connection whose ``prepare_call`` returns recording statements."""
    return PreparingConnection()
