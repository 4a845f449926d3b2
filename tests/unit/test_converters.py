import datetime

import numpy as np
import pandas as pd
import pytest
from dbcall.converters import Converter, DateDecoder, DatetimeDecoder
from dbcall.converters import FunctionConverter, JsonDecoder, JsonEncoder
from dbcall.converters import NumpyEncoder, RefCursorDecoder, as_converter
from dbcall.options import iterdict_data_loader, pandas_numpy_data_loader

import config


class TestAsConverter:
    """Test normalizing converter objects and callables."""

    def test_none(self):
        assert as_converter(None) is None

    def test_object_passthrough(self):
        encoder = JsonEncoder()
        assert as_converter(encoder) is encoder
        assert isinstance(encoder, Converter)

    def test_callable_wrapped(self):
        def triple(cn, value):
            return value * 3

        converter = as_converter(triple)
        assert isinstance(converter, FunctionConverter)
        assert converter.perform(None, 2) == 6
        assert converter == FunctionConverter(triple)

    def test_reject(self):
        with pytest.raises(TypeError):
            as_converter(42)


class TestNumpyEncoder:
    """Test NumPy and pandas scalars become native values."""

    @pytest.mark.parametrize(('value', 'expected'), [
        (np.int64(5), 5),
        (np.float32(1.5), 1.5),
        (np.bool_(True), True),
        ('text', 'text'),
        (None, None),
    ])
    def test_values(self, value, expected):
        result = NumpyEncoder().perform(None, value)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize('value', [np.nan, float('nan'), float('inf'), pd.NaT,
                                       pd.NA, np.datetime64('NaT')])
    def test_nulls(self, value):
        assert NumpyEncoder().perform(None, value) is None

    def test_timestamps(self):
        expected = datetime.datetime(2025, 1, 1, 12, 30)
        assert NumpyEncoder().perform(None, pd.Timestamp(expected)) == expected
        assert NumpyEncoder().perform(None, np.datetime64('2025-01-01T12:30')) == expected


class TestJson:

    def test_encode(self):
        assert JsonEncoder().perform(None, {'a': [1, 2]}) == '{"a": [1, 2]}'
        assert JsonEncoder(sort_keys=True).perform(None, {'b': 1, 'a': 2}) == '{"a": 2, "b": 1}'
        assert JsonEncoder().perform(None, None) is None

    def test_decode(self):
        assert JsonDecoder().perform(None, '{"a": 1}') == {'a': 1}
        assert JsonDecoder().perform(None, b'[1]') == [1]
        assert JsonDecoder().perform(None, {'already': 'decoded'}) == {'already': 'decoded'}
        assert JsonDecoder().perform(None, None) is None


class TestDates:

    def test_date_decoder(self):
        decoder = DateDecoder()
        assert decoder.perform(None, '2025-03-11') == datetime.date(2025, 3, 11)
        assert decoder.perform(None, b'2025-03-11') == datetime.date(2025, 3, 11)
        assert decoder.perform(None, datetime.datetime(2025, 3, 11, 8)) == datetime.date(2025, 3, 11)
        assert decoder.perform(None, datetime.date(2025, 3, 11)) == datetime.date(2025, 3, 11)
        assert decoder.perform(None, None) is None

    def test_datetime_decoder(self):
        decoder = DatetimeDecoder()
        assert decoder.perform(None, '2025-03-11T08:15:00') == datetime.datetime(2025, 3, 11, 8, 15)
        assert decoder.perform(None, datetime.date(2025, 3, 11)) == datetime.datetime(2025, 3, 11)
        assert decoder.perform(None, None) is None


class FetchCursor:
    """Cursor stub answering FETCH ALL with canned rows."""

    def __init__(self, log):
        self.log = log
        self.description = [('value',), ('square',)]

    def execute(self, sql):
        self.log.append(sql)

    def fetchall(self):
        return [(1, 1), (2, 4)]

    def close(self):
        self.log.append('closed')


class FetchConnection:

    def __init__(self):
        self.log = []

    def cursor(self):
        return FetchCursor(self.log)


class TestRefCursorDecoder:
    """Test refcursor outputs are fetched through the connection."""

    def test_fetch_rows(self):
        cn = FetchConnection()
        rows = RefCursorDecoder().perform(cn, '<unnamed portal 1>')
        assert rows == [{'value': 1, 'square': 1}, {'value': 2, 'square': 4}]
        assert cn.log == ['FETCH ALL FROM "<unnamed portal 1>"', 'closed']

    def test_quotes_portal_name(self):
        cn = FetchConnection()
        RefCursorDecoder().perform(cn, 'odd"name')
        assert cn.log[0] == 'FETCH ALL FROM "odd""name"'

    def test_data_loader(self):
        df = RefCursorDecoder(pandas_numpy_data_loader).perform(FetchConnection(), 'c')
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['value', 'square']
        assert df['square'].tolist() == [1, 4]

    def test_data_loader_from_options(self):
        decoder = RefCursorDecoder(options={'data_loader': pandas_numpy_data_loader})
        assert decoder.data_loader is pandas_numpy_data_loader
        assert isinstance(decoder.perform(FetchConnection(), 'c'), pd.DataFrame)

    def test_data_loader_from_config(self):
        decoder = RefCursorDecoder(options='postgresql_calls', config=config)
        assert decoder.data_loader is iterdict_data_loader

    def test_null(self):
        assert RefCursorDecoder().perform(FetchConnection(), None) is None


if __name__ == '__main__':
    __import__('pytest').main([__file__])
