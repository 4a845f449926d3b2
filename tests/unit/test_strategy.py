"""
Unit tests for dialect strategies and the strategy registry.
"""
import pytest
from dbcall.exceptions import QueryError
from dbcall.strategy import CallStrategy, PostgresStrategy, SQLiteStrategy
from dbcall.strategy import get_available_dialects, get_db_strategy
from dbcall.strategy import get_strategy, is_supported_dialect
from dbcall.types import SqlType


def test_registry():
    """Test the built-in dialects are registered"""
    assert set(get_available_dialects()) >= {'postgresql', 'sqlite'}
    assert is_supported_dialect('postgresql')
    assert not is_supported_dialect('oracle')
    assert get_available_dialects() == sorted(get_available_dialects())
    with pytest.raises(ValueError, match='Unsupported dialect: oracle'):
        get_strategy('oracle')


def test_strategy_cached():
    """Test strategy instances are reused per dialect"""
    assert get_strategy('postgresql') is get_strategy('postgresql')
    assert isinstance(get_strategy('postgresql'), PostgresStrategy)
    assert isinstance(get_strategy('sqlite'), SQLiteStrategy)


def test_db_strategy(sqlite_conn, mocker):
    """Test strategy lookup from a connection"""
    assert isinstance(get_db_strategy(sqlite_conn), SQLiteStrategy)
    conn = mocker.Mock(spec=['dialect'])
    conn.dialect.name = 'postgresql'
    assert isinstance(get_db_strategy(conn), PostgresStrategy)


class TestPostgresStrategy:
    """Test PostgreSQL call rendering."""

    @pytest.fixture
    def strategy(self):
        return get_strategy('postgresql')

    def test_type_name(self, strategy):
        assert strategy.type_name(SqlType.INTEGER) == 'integer'
        assert strategy.type_name(SqlType.STRUCT, 'address_t') == 'address_t'
        assert strategy.type_name(None) is None
        assert strategy.type_name(-424242) is None

    @pytest.mark.parametrize(('type_name', 'cast', 'expected'), [
        ('integer', True, '%s::integer'),
        ('integer', False, '%s'),
        (None, True, '%s'),
    ])
    def test_render_argument(self, strategy, type_name, cast, expected):
        assert strategy.render_argument(type_name, cast) == expected

    def test_render_calls(self, strategy):
        assert strategy.render_procedure('pkg.proc', ['%s', '%s']) == 'CALL pkg.proc(%s, %s)'
        assert strategy.render_procedure('refresh', []) == 'CALL refresh()'
        assert strategy.render_function('fn', ['%s']) == 'SELECT * FROM fn(%s)'
        assert strategy.render_named_argument('who', '%s') == 'who => %s'


class TestSQLiteStrategy:
    """Test SQLite call rendering."""

    @pytest.fixture
    def strategy(self):
        return get_strategy('sqlite')

    def test_render_argument(self, strategy):
        assert strategy.render_argument('INTEGER') == 'CAST(? AS INTEGER)'
        assert strategy.render_argument('INTEGER', cast=False) == '?'
        assert strategy.render_argument(None) == '?'

    def test_render_function(self, strategy):
        assert strategy.render_function('add_one', ['?']) == 'SELECT add_one(?)'

    def test_unsupported(self, strategy):
        with pytest.raises(QueryError):
            strategy.render_procedure('proc', ['?'])
        with pytest.raises(QueryError):
            strategy.render_named_argument('x', '?')


def test_custom_strategy():
    """Test a strategy subclass only needs the abstract members"""

    class EchoStrategy(CallStrategy):
        dialect_name = 'echo'
        placeholder = ':p'

        def type_name(self, type_code, struct=None):
            return None

        def render_function(self, name, arguments):
            return f'SELECT {name}({", ".join(arguments)})'

    strategy = EchoStrategy()
    assert strategy.render_argument('int') == ':p'
    assert strategy.render_procedure('p', [':p']) == 'CALL p(:p)'


if __name__ == '__main__':
    __import__('pytest').main([__file__])
